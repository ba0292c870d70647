"""Argument checks performed before any task is started."""

from __future__ import annotations

from numbers import Real
from typing import Any, Mapping, Optional, Union

from ..errors import InvalidArgumentError
from ..types import DispatchOptions


def validate_arguments(tasks: Any, window_size: Any, interval: Any) -> None:
    """
    Check the dispatch contract.

    Raises:
        InvalidArgumentError: If ``window_size`` is not an int of at least 1,
            ``interval`` is not a positive number, or ``tasks`` is empty or
            holds something other than callables
    """
    if isinstance(window_size, bool) or not isinstance(window_size, int):
        raise InvalidArgumentError(
            f'"window_size" must be an integer, got {type(window_size).__name__}'
        )
    if window_size < 1:
        raise InvalidArgumentError('"window_size" must be at least 1')

    if isinstance(interval, bool) or not isinstance(interval, Real):
        raise InvalidArgumentError(
            f'"interval" must be a number, got {type(interval).__name__}'
        )
    if not interval > 0:
        raise InvalidArgumentError('"interval" must be a positive number')

    if not isinstance(tasks, (list, tuple)) or not tasks:
        raise InvalidArgumentError('"tasks" must be a sequence of callables to execute')
    for index, task in enumerate(tasks):
        if not callable(task):
            raise InvalidArgumentError(
                f'"tasks[{index}]" is not callable: {type(task).__name__}'
            )


def resolve_options(
    options: Optional[Union[DispatchOptions, Mapping[str, Any]]],
) -> DispatchOptions:
    """Normalize ``options`` to a ``DispatchOptions``; ``None`` disables everything."""
    if options is None:
        return DispatchOptions()
    if isinstance(options, Mapping):
        try:
            options = DispatchOptions.from_mapping(options)
        except TypeError as e:
            raise InvalidArgumentError(str(e)) from e
    if not isinstance(options, DispatchOptions):
        raise InvalidArgumentError(
            f'"options" must be DispatchOptions or a mapping, got {type(options).__name__}'
        )

    batch_size = options.batch_size
    if batch_size is not None:
        if isinstance(batch_size, bool) or not isinstance(batch_size, int):
            raise InvalidArgumentError('"batch_size" must be an integer')
        if batch_size < 0:
            raise InvalidArgumentError('"batch_size" must not be negative')
    return options
