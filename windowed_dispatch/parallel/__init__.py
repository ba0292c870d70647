"""
Windowed Parallel Dispatch.

Executes independent asynchronous tasks in fixed-size concurrency windows
separated by a delay, keeping results in the original task order.

Key Components:
    - dispatch: Coroutine that runs one list of tasks to completion
    - RateLimitedDispatcher: Reusable dispatcher bound to one configuration
    - BatchAccumulator: Re-emits results in in-order reporting groupings
    - ProgressTracker: Reports cumulative completion once per window
    - ResultSlots: Write-once ordered result storage

Example:
    >>> from windowed_dispatch.parallel import dispatch
    >>> results = await dispatch(requests, window_size=25, interval=1.0)
"""

from .accumulator import BatchAccumulator
from .progress import ProgressTracker
from .scheduler import (
    DispatchState,
    DispatchStats,
    RateLimitedDispatcher,
    dispatch,
    dispatch_sync,
)
from .slots import ResultSlots
from .validation import resolve_options, validate_arguments

__all__ = [
    "BatchAccumulator",
    "DispatchState",
    "DispatchStats",
    "ProgressTracker",
    "RateLimitedDispatcher",
    "ResultSlots",
    "dispatch",
    "dispatch_sync",
    "resolve_options",
    "validate_arguments",
]
