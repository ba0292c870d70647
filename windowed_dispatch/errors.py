"""Exceptions raised by the dispatcher."""

from __future__ import annotations

from typing import List, Tuple


class InvalidArgumentError(ValueError):
    """Raised before any task runs when the dispatch arguments are unusable."""


class TaskFailureError(RuntimeError):
    """
    Raised once every task has settled and at least one of them failed.

    Attributes:
        index: Task index of the first failure, in completion order
        original: The exception raised by that task
        failures: Every ``(index, exception)`` pair, in completion order
    """

    def __init__(self, failures: List[Tuple[int, BaseException]]) -> None:
        if not failures:
            raise ValueError("TaskFailureError requires at least one failure")
        self.failures = list(failures)
        self.index, self.original = self.failures[0]
        message = f"Task {self.index} failed: {self.original!r}"
        if len(self.failures) > 1:
            message += f" ({len(self.failures) - 1} more task(s) failed)"
        super().__init__(message)

    @property
    def failed_indices(self) -> List[int]:
        return sorted(index for index, _ in self.failures)
