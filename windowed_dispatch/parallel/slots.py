"""Write-once, index-addressed storage for task results."""

from __future__ import annotations

from typing import Any, List

_EMPTY = object()


class ResultSlots:
    """
    Fixed-length result storage, one slot per task.

    A slot holding ``None`` counts as written; only never-written slots are
    empty.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        self._values: List[Any] = [_EMPTY] * size

    def __len__(self) -> int:
        return len(self._values)

    def write(self, index: int, value: Any) -> None:
        if self._values[index] is not _EMPTY:
            raise RuntimeError(f"Result slot {index} was already written")
        self._values[index] = value

    def to_list(self) -> List[Any]:
        """Return the results in task order; unwritten slots become ``None``."""
        return [None if v is _EMPTY else v for v in self._values]
