"""Rate-limited, windowed dispatch of independent asynchronous tasks."""

from .config_loader import DispatcherConfig, load_dispatch_config
from .errors import InvalidArgumentError, TaskFailureError
from .parallel import RateLimitedDispatcher, dispatch, dispatch_sync
from .types import BatchCompletion, DispatchOptions, Progress

__all__ = [
    "BatchCompletion",
    "DispatchOptions",
    "DispatcherConfig",
    "InvalidArgumentError",
    "Progress",
    "RateLimitedDispatcher",
    "TaskFailureError",
    "dispatch",
    "dispatch_sync",
    "load_dispatch_config",
]
