from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import InvalidArgumentError

_KNOWN_KEYS = {"window_size", "interval", "batch_size"}


@dataclass
class DispatcherConfig:
    """Settings for a rate-limited dispatcher.

    Attributes:
        window_size: Tasks launched together in one execution window
        interval: Seconds between consecutive window launches
        batch_size: Reporting grouping size, or None to disable groupings
        extra: Unrecognized keys from a config file, kept as-is
    """

    window_size: int = 25
    interval: float = 1.0
    batch_size: int | None = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "DispatcherConfig":
        """Load settings from WINDOWED_DISPATCH_* environment variables."""
        batch_size = os.getenv("WINDOWED_DISPATCH_BATCH_SIZE")
        try:
            return cls(
                window_size=int(os.getenv("WINDOWED_DISPATCH_WINDOW_SIZE", "25")),
                interval=float(os.getenv("WINDOWED_DISPATCH_INTERVAL", "1.0")),
                batch_size=int(batch_size) if batch_size else None,
            )
        except ValueError as e:
            raise InvalidArgumentError(f"Invalid dispatcher environment setting: {e}") from e


def load_dispatch_config(path: str | Path) -> DispatcherConfig:
    data = yaml.safe_load(Path(path).read_text()) or {}
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Dispatcher config {path} must be a mapping")
    return DispatcherConfig(
        window_size=data.get("window_size", 25),
        interval=data.get("interval", 1.0),
        batch_size=data.get("batch_size"),
        extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
    )
