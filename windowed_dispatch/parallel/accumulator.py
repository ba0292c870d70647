"""
Batch Accumulator for windowed dispatch.

Execution windows and reporting groupings partition the same index space
with unrelated sizes, and windows may settle in any order. The accumulator
records each settled window's results by global index and emits a
reporting grouping as soon as every slot in it is populated.

Algorithm:
    - Copy the window's results into their global slots
    - From the cursor, check groupings of ``batch_size`` in order
    - Emit every consecutive fully populated grouping, clear its slots
      and advance the cursor past it
    - Stop at the first grouping that still has an empty slot

A single window can complete several pending groupings, including one that
straddles earlier windows which settled out of order.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Sequence

from ..types import BatchCallback, BatchCompletion

logger = logging.getLogger(__name__)

_EMPTY = object()


class BatchAccumulator:
    """
    Re-emits settled results in fixed-size, in-order groupings.

    Example:
        >>> acc = BatchAccumulator(total=4, batch_size=2, on_batch_complete=print)
        >>> acc.on_window_complete(2, 4, ["c", "d"])  # nothing emitted yet
        >>> acc.on_window_complete(0, 2, ["a", "b"])  # emits [0,1] then [2,3]

    Thread Safety:
        ``on_window_complete`` holds a lock for the whole record-and-scan
        step, so concurrent window completions cannot interleave emissions.
    """

    def __init__(
        self,
        total: int,
        batch_size: int,
        on_batch_complete: Optional[BatchCallback],
    ) -> None:
        """
        Initialize the accumulator.

        Args:
            total: Number of tasks in the dispatch
            batch_size: Size of each reporting grouping
            on_batch_complete: Receives each completed grouping
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        self._total = total
        self._batch_size = batch_size
        self._on_batch_complete = on_batch_complete
        self._slots: list[Any] = [_EMPTY] * total
        self._cursor = 0
        self._emitted = 0
        self._lock = threading.Lock()

        # No grouping can ever be complete
        self._enabled = batch_size <= total
        if not self._enabled:
            logger.debug(
                "batch_size=%d exceeds total=%d; no groupings will be emitted",
                batch_size,
                total,
            )

    @property
    def cursor(self) -> int:
        """Start index of the next grouping not yet emitted."""
        return self._cursor

    @property
    def emitted_count(self) -> int:
        return self._emitted

    def on_window_complete(
        self,
        window_start: int,
        window_end: int,
        window_results: Sequence[Any],
    ) -> None:
        """
        Record a settled window and emit every grouping it completes.

        Args:
            window_start: First global index of the window
            window_end: One past the last global index of the window
            window_results: Results for ``[window_start, window_end)``

        Raises:
            ValueError: If the results do not match the window range
            Exception: The first error raised by ``on_batch_complete``, once
                every grouping this window completes has been emitted
        """
        if len(window_results) != window_end - window_start:
            raise ValueError(
                f"Window [{window_start}, {window_end}) expects "
                f"{window_end - window_start} results, got {len(window_results)}"
            )

        callback_error: Optional[BaseException] = None
        with self._lock:
            if not self._enabled:
                return

            for offset, value in enumerate(window_results):
                self._slots[window_start + offset] = value

            while self._cursor < self._total:
                start = self._cursor
                end = min(start + self._batch_size, self._total)
                if any(v is _EMPTY for v in self._slots[start:end]):
                    break

                results = self._slots[start:end]
                for i in range(start, end):
                    self._slots[i] = _EMPTY
                self._cursor = end
                self._emitted += 1

                completion = BatchCompletion(
                    start_index=start,
                    stop_index=end - 1,
                    results=results,
                )
                logger.debug("Grouping complete: [%d, %d]", start, end - 1)
                if self._on_batch_complete is None:
                    continue
                try:
                    self._on_batch_complete(completion)
                except Exception as e:
                    logger.warning(
                        "on_batch_complete failed for [%d, %d]: %s", start, end - 1, e
                    )
                    if callback_error is None:
                        callback_error = e

        if callback_error is not None:
            raise callback_error
