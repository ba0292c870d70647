from __future__ import annotations

import logging
import threading
from typing import Optional

from ..types import Progress, ProgressCallback

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Counts completed tasks one settled window at a time."""

    def __init__(self, total: int, on_progress: Optional[ProgressCallback]) -> None:
        self._total = total
        self._completed = 0
        self._on_progress = on_progress
        self._lock = threading.Lock()

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def total(self) -> int:
        return self._total

    def on_window_complete(self, window_start: int, window_end: int) -> Progress:
        with self._lock:
            self._completed += window_end - window_start
            progress = Progress(
                total_requests=self._total,
                completed_requests=self._completed,
            )
            logger.debug(
                "Progress: %d/%d (%.1f%%)",
                progress.completed_requests,
                progress.total_requests,
                100 * progress.fraction,
            )
            if self._on_progress is not None:
                self._on_progress(progress)
        return progress
