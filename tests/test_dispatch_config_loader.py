import pytest

from windowed_dispatch import DispatcherConfig, InvalidArgumentError, load_dispatch_config


def test_load_dispatch_config(tmp_path):
    yaml_text = """
window_size: 10
interval: 0.5
batch_size: 5
label: nightly
"""
    cfg_path = tmp_path / "dispatch.yaml"
    cfg_path.write_text(yaml_text)
    cfg = load_dispatch_config(cfg_path)
    assert cfg.window_size == 10
    assert cfg.interval == 0.5
    assert cfg.batch_size == 5
    assert cfg.extra["label"] == "nightly"


def test_load_dispatch_config_defaults(tmp_path):
    cfg_path = tmp_path / "empty.yaml"
    cfg_path.write_text("")
    cfg = load_dispatch_config(cfg_path)
    assert cfg == DispatcherConfig()


def test_load_dispatch_config_rejects_list(tmp_path):
    cfg_path = tmp_path / "bad.yaml"
    cfg_path.write_text("- 1\n- 2\n")
    with pytest.raises(InvalidArgumentError):
        load_dispatch_config(cfg_path)


def test_from_env(monkeypatch):
    monkeypatch.setenv("WINDOWED_DISPATCH_WINDOW_SIZE", "100")
    monkeypatch.setenv("WINDOWED_DISPATCH_INTERVAL", "2.5")
    monkeypatch.setenv("WINDOWED_DISPATCH_BATCH_SIZE", "50")
    cfg = DispatcherConfig.from_env()
    assert (cfg.window_size, cfg.interval, cfg.batch_size) == (100, 2.5, 50)


def test_from_env_defaults(monkeypatch):
    for name in ("WINDOWED_DISPATCH_WINDOW_SIZE", "WINDOWED_DISPATCH_INTERVAL", "WINDOWED_DISPATCH_BATCH_SIZE"):
        monkeypatch.delenv(name, raising=False)
    cfg = DispatcherConfig.from_env()
    assert (cfg.window_size, cfg.interval, cfg.batch_size) == (25, 1.0, None)


def test_from_env_invalid(monkeypatch):
    monkeypatch.setenv("WINDOWED_DISPATCH_WINDOW_SIZE", "many")
    with pytest.raises(InvalidArgumentError):
        DispatcherConfig.from_env()
