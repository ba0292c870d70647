from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional


@dataclass
class BatchCompletion:
    """
    A fully populated reporting grouping.

    ``start_index`` and ``stop_index`` are both inclusive.
    """

    start_index: int
    stop_index: int
    results: List[Any] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "startIndex": self.start_index,
            "stopIndex": self.stop_index,
            "results": list(self.results),
        }


@dataclass
class Progress:
    total_requests: int
    completed_requests: int

    @property
    def fraction(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.completed_requests / self.total_requests

    def as_dict(self) -> Dict[str, int]:
        return {
            "totalRequests": self.total_requests,
            "completedRequests": self.completed_requests,
        }


BatchCallback = Callable[[BatchCompletion], None]
ProgressCallback = Callable[[Progress], None]


_OPTION_ALIASES = {
    "batchSize": "batch_size",
    "onBatchComplete": "on_batch_complete",
    "onProgress": "on_progress",
}


@dataclass
class DispatchOptions:
    """Optional observers for a dispatch run.

    Attributes:
        batch_size: Size of the reporting grouping
        on_batch_complete: Called with each completed grouping
        on_progress: Called once per settled execution window
    """

    batch_size: Optional[int] = None
    on_batch_complete: Optional[BatchCallback] = None
    on_progress: Optional[ProgressCallback] = None

    @property
    def batches_enabled(self) -> bool:
        return bool(self.batch_size) and self.on_batch_complete is not None

    @property
    def progress_enabled(self) -> bool:
        return self.on_progress is not None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "DispatchOptions":
        """Build options from a dict using snake_case or camelCase keys."""
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in {"batch_size", "on_batch_complete", "on_progress"}:
                raise TypeError(f"Unknown dispatch option: {key}")
            values[name] = value
        return cls(**values)
