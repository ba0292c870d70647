import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    dispatch_level: Optional[str] = None,
) -> None:
    """
    Configure basic logging for applications using windowed_dispatch.

    Parameters
    ----------
    level:
        Root logging level name (e.g., "INFO", "DEBUG").
    log_file:
        Optional path to log output. When not provided, logs go to stderr.
    dispatch_level:
        Optional level for the ``windowed_dispatch`` loggers only. "DEBUG"
        shows every window launch, grouping emission and progress update.
    """

    log_kwargs = {
        "level": _to_level(level),
        "format": LOG_FORMAT,
    }

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        log_kwargs["filename"] = log_file

    logging.basicConfig(**log_kwargs)

    if dispatch_level:
        logging.getLogger("windowed_dispatch").setLevel(_to_level(dispatch_level))


def _to_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)
