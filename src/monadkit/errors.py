"""Programming-error types raised by monadkit.

Domain failures are values (``Failure``, ``Nothing``, ``Error``, ``Invalid``).
The exceptions below signal contract violations by the calling code and are
never converted into container values.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    'BlockingBindError',
    'DoScopeError',
    'LazyRecursionError',
    'MonadError',
    'TaskPendingError',
    'TypeMismatchError',
    'UnsupportedMonadError',
    'UnwrapError',
]


class MonadError(Exception):
    """Base class for monadkit programming errors."""


class TypeMismatchError(MonadError, TypeError):
    """A fixed-error ``Failure`` was given a payload its error spec rejects."""

    def __init__(self, value: Any, spec: Any) -> None:
        self.value = value
        self.spec = spec
        super().__init__(f'{value!r} does not match error spec {spec!r}')


class UnsupportedMonadError(MonadError, TypeError):
    """``bind`` was given something that is not a bindable container."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f'cannot bind {type(value).__name__} {value!r}: expected Result, Maybe, Try or Task'
        )


class BlockingBindError(MonadError, RuntimeError):
    """``bind`` was given a pending Task on an event loop thread.

    Waiting there would block the loop the Task may need to run on.
    """

    def __init__(self, task: Any) -> None:
        self.task = task
        super().__init__(f'cannot bind pending {task!r} on an event loop; await it first')


class DoScopeError(MonadError, RuntimeError):
    """``bind`` was called outside of any ``Do`` scope."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f'bind({value!r}) called outside of a Do scope')


class UnwrapError(MonadError, RuntimeError):
    """``unwrap`` was called on a failure-like variant."""

    def __init__(self, container: Any) -> None:
        self.container = container
        super().__init__(f'called unwrap on {container!r}')


class LazyRecursionError(MonadError, RuntimeError):
    """A ``Lazy`` was forced from inside its own computation."""

    def __init__(self) -> None:
        super().__init__('Lazy computation forced itself recursively')


class TaskPendingError(MonadError, TimeoutError):
    """Waiting on a ``Task`` timed out before it completed."""

    def __init__(self, timeout: float | None) -> None:
        self.timeout = timeout
        super().__init__(f'Task still pending after {timeout}s')
