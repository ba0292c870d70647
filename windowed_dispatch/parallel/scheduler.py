"""
Window Scheduler for windowed dispatch.

Runs an ordered list of independent tasks in fixed-size execution windows,
throttled by a delay between window launches, and returns their results in
the original order.

Architecture:
    - Window-level throttling: the delay paces task submission, it does not
      drain concurrency, so windows may overlap in execution time
    - Each task writes its result into its own slot, so completion order
      never affects result order
    - One watcher per window feeds the batch accumulator and the progress
      tracker once every task in that window has settled

Failure Policy:
    - A failing task never cancels or hides its siblings
    - Once every task has settled, the first failure (in completion order)
      is raised as TaskFailureError, chained to the original exception
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ..config_loader import DispatcherConfig
from ..errors import TaskFailureError
from ..types import BatchCallback, DispatchOptions, ProgressCallback
from .accumulator import BatchAccumulator
from .progress import ProgressTracker
from .slots import ResultSlots
from .validation import resolve_options, validate_arguments

logger = logging.getLogger(__name__)

Task = Callable[[], Union[Awaitable[Any], Any]]
OptionsLike = Union[DispatchOptions, Mapping[str, Any], None]


@dataclass
class DispatchState:
    """Everything one dispatch call mutates; created per call and discarded on return."""

    slots: ResultSlots
    accumulator: Optional[BatchAccumulator] = None
    tracker: Optional[ProgressTracker] = None
    failures: List[Tuple[int, BaseException]] = field(default_factory=list)

    @classmethod
    def create(cls, total: int, options: DispatchOptions) -> "DispatchState":
        accumulator = None
        if options.batches_enabled:
            accumulator = BatchAccumulator(
                total=total,
                batch_size=options.batch_size,
                on_batch_complete=options.on_batch_complete,
            )
        tracker = None
        if options.progress_enabled:
            tracker = ProgressTracker(total=total, on_progress=options.on_progress)
        return cls(slots=ResultSlots(total), accumulator=accumulator, tracker=tracker)


def _iter_windows(total: int, window_size: int) -> Iterator[Tuple[int, int]]:
    for start in range(0, total, window_size):
        yield start, min(start + window_size, total)


async def _run_task(task: Task, index: int, state: DispatchState) -> Any:
    """
    Invoke a single task and store its result in slot ``index``.

    The task is called on the event loop. An awaitable it returns (a
    coroutine, future or task) is awaited; anything else is the result.
    """
    try:
        value = task()
        if inspect.isawaitable(value):
            value = await value
    except Exception as e:
        state.failures.append((index, e))
        logger.warning("Task %d failed: %s", index, str(e)[:200])
        raise

    state.slots.write(index, value)
    return value


async def _watch_window(
    state: DispatchState,
    futures: Sequence["asyncio.Future[Any]"],
    start: int,
    end: int,
) -> None:
    outcomes = await asyncio.gather(*futures, return_exceptions=True)

    if any(isinstance(outcome, BaseException) for outcome in outcomes):
        logger.warning(
            "Window [%d, %d) did not complete; skipping batch and progress notification",
            start,
            end,
        )
        return

    observer_error: Optional[BaseException] = None
    if state.accumulator is not None:
        try:
            state.accumulator.on_window_complete(start, end, outcomes)
        except Exception as e:
            observer_error = e
    if state.tracker is not None:
        try:
            state.tracker.on_window_complete(start, end)
        except Exception as e:
            logger.warning("on_progress failed for window [%d, %d): %s", start, end, e)
            if observer_error is None:
                observer_error = e

    if observer_error is not None:
        raise observer_error


async def dispatch(
    tasks: Sequence[Task],
    window_size: int,
    interval: float,
    options: OptionsLike = None,
) -> List[Any]:
    """
    Run ``tasks`` in throttled windows and return their results in order.

    Args:
        tasks: Zero-argument callables; coroutine functions, or callables
            returning a value or an awaitable
        window_size: Number of tasks launched together in one window
        interval: Seconds to wait between consecutive window launches
        options: Optional ``DispatchOptions`` (or equivalent mapping) with
            grouping and progress callbacks

    Returns:
        List where item ``i`` is the result of ``tasks[i]``

    Raises:
        InvalidArgumentError: If the arguments are invalid; no task is started
        TaskFailureError: If any task raised, after all tasks have settled

    Example:
        >>> results = await dispatch(requests, 25, 1.0, DispatchOptions(
        ...     batch_size=10, on_batch_complete=save_batch))
    """
    if isinstance(tasks, Iterable) and not isinstance(tasks, (list, tuple)):
        tasks = list(tasks)
    validate_arguments(tasks, window_size, interval)
    resolved = resolve_options(options)

    total = len(tasks)
    state = DispatchState.create(total, resolved)
    launched: List["asyncio.Future[Any]"] = []
    watchers: List["asyncio.Future[None]"] = []

    start_time = time.time()
    logger.info(
        "Starting dispatch: %d tasks, window_size=%d, interval=%.3fs",
        total,
        window_size,
        interval,
    )

    try:
        for start, end in _iter_windows(total, window_size):
            futures = [
                asyncio.ensure_future(_run_task(tasks[i], i, state))
                for i in range(start, end)
            ]
            launched.extend(futures)
            watchers.append(asyncio.ensure_future(_watch_window(state, futures, start, end)))
            logger.debug("Launched window [%d, %d)", start, end)

            if end < total:
                await asyncio.sleep(interval)

        await asyncio.gather(*launched, return_exceptions=True)
        observer_outcomes = await asyncio.gather(*watchers, return_exceptions=True)
    except asyncio.CancelledError:
        for future in launched + watchers:
            if not future.done():
                future.cancel()
        raise

    elapsed_ms = (time.time() - start_time) * 1000

    observer_errors = [o for o in observer_outcomes if isinstance(o, BaseException)]

    if state.failures:
        logger.info(
            "Dispatch finished with %d failed task(s) in %.1fs",
            len(state.failures),
            elapsed_ms / 1000,
        )
        for observer_error in observer_errors:
            logger.warning("Observer callback failed: %s", str(observer_error)[:200])
        error = TaskFailureError(state.failures)
        raise error from error.original

    if observer_errors:
        raise observer_errors[0]

    logger.info("Dispatch complete: %d tasks in %.1fs", total, elapsed_ms / 1000)
    return state.slots.to_list()


@dataclass
class DispatchStats:
    """Statistics across runs of one dispatcher.

    Attributes:
        runs: Number of completed ``run`` calls (successful or not)
        tasks_dispatched: Total tasks handed to ``dispatch``
        failed_runs: Runs that ended with an exception
        last_time_ms: Wall-clock duration of the most recent run
    """

    runs: int = 0
    tasks_dispatched: int = 0
    failed_runs: int = 0
    last_time_ms: float = 0.0


class RateLimitedDispatcher:
    """
    Reusable dispatcher bound to one window size and interval.

    Example:
        >>> dispatcher = RateLimitedDispatcher(window_size=25, interval=1.0)
        >>> results = await dispatcher.run(requests)

        >>> # With groupings reported every 10 results
        >>> dispatcher = RateLimitedDispatcher(
        ...     window_size=25,
        ...     interval=1.0,
        ...     batch_size=10,
        ...     on_batch_complete=save_batch,
        ... )
    """

    def __init__(
        self,
        window_size: int = 25,
        interval: float = 1.0,
        batch_size: int | None = None,
        on_batch_complete: BatchCallback | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._config = DispatcherConfig(
            window_size=window_size,
            interval=interval,
            batch_size=batch_size,
        )
        self._on_batch_complete = on_batch_complete
        self._on_progress = on_progress
        self._stats = DispatchStats()

        logger.info(
            "RateLimitedDispatcher initialized: window_size=%d, interval=%.3fs, batch_size=%s",
            window_size,
            interval,
            batch_size,
        )

    @classmethod
    def from_config(
        cls,
        config: DispatcherConfig,
        on_batch_complete: BatchCallback | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> "RateLimitedDispatcher":
        return cls(
            window_size=config.window_size,
            interval=config.interval,
            batch_size=config.batch_size,
            on_batch_complete=on_batch_complete,
            on_progress=on_progress,
        )

    @property
    def config(self) -> DispatcherConfig:
        """Get current configuration."""
        return self._config

    @property
    def stats(self) -> DispatchStats:
        return self._stats

    def default_options(self) -> DispatchOptions:
        return DispatchOptions(
            batch_size=self._config.batch_size,
            on_batch_complete=self._on_batch_complete,
            on_progress=self._on_progress,
        )

    async def run(self, tasks: Sequence[Task], options: OptionsLike = None) -> List[Any]:
        """
        Dispatch ``tasks`` with this dispatcher's settings.

        ``options`` replaces the dispatcher's own callbacks for this call only.
        """
        if tasks is not None:
            tasks = list(tasks)
        if options is None:
            options = self.default_options()

        start_time = time.time()
        try:
            return await dispatch(
                tasks,
                self._config.window_size,
                self._config.interval,
                options,
            )
        except Exception:
            self._stats.failed_runs += 1
            raise
        finally:
            self._stats.runs += 1
            self._stats.tasks_dispatched += len(tasks) if tasks else 0
            self._stats.last_time_ms = (time.time() - start_time) * 1000

    def reset_stats(self) -> None:
        self._stats = DispatchStats()

    async def __aenter__(self) -> "RateLimitedDispatcher":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        pass


def dispatch_sync(
    tasks: Sequence[Task],
    window_size: int,
    interval: float,
    options: OptionsLike = None,
) -> List[Any]:
    """
    Synchronous wrapper around ``dispatch``.

    Convenience function for non-async code; must not be called from a
    running event loop.

    Example:
        >>> from windowed_dispatch import dispatch_sync
        >>> results = dispatch_sync(requests, window_size=10, interval=0.5)
    """
    return asyncio.run(dispatch(tasks, window_size, interval, options))
