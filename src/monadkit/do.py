"""Do-notation: short-circuit scopes for Result, Maybe, Try and Task.

Inside a scope, ``bind(container)`` returns the payload of a success-like
container and stops the scope on a failure-like one, making that failure the
scope's result:

    ```python
    from monadkit import Do, Failure, Success, bind

    def transfer():
        account = bind(find_account(1))     # Success(account) -> account
        user = bind(find_user(account))     # Failure(...) -> scope returns it
        return Success((account, user))

    Do(transfer)
    ```

``Do`` opens a scope for one call; ``do``, ``do_for`` and ``DoForCall`` attach
a scope to every call of a function or method.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from contextvars import ContextVar
from typing import Any, NoReturn, ParamSpec, TypeVar

import wrapt

from monadkit._logging import get_logger
from monadkit.errors import BlockingBindError, DoScopeError, UnsupportedMonadError
from monadkit.halt import Halt
from monadkit.maybe import NothingType, Some
from monadkit.result import Failure, Success
from monadkit.task import Task
from monadkit.try_ import Error, Value

__all__ = ['Do', 'DoContext', 'DoForCall', 'bind', 'do', 'do_for']

P = ParamSpec('P')
T = TypeVar('T')

_log = get_logger(__name__)

_current: ContextVar[DoContext | None] = ContextVar('monadkit_do_context', default=None)


class DoContext:
    """State of one Do scope: whether a short-circuit fired, and with what.

    A context lives for the dynamic extent of a single scope call and is never
    reused.
    """

    __slots__ = ('halted', 'halted_with')

    def __init__(self) -> None:
        self.halted = False
        self.halted_with: Any = None

    def halt(self, value: Any) -> NoReturn:
        """Record the failure and leave the scope."""
        if not self.halted:
            self.halted = True
            self.halted_with = value
            _log.debug('do scope halted', failure=repr(value))
        raise Halt(self, self.halted_with)


def current_context() -> DoContext | None:
    """Return the innermost active Do scope, or None outside any scope."""
    return _current.get()


def bind(container: Any) -> Any:
    """Unwrap a container inside the current Do scope.

    Args:
        container: A Result, Maybe, Try or Task. A Task is waited on (blocking)
            and bound as its Result; on an event loop it must already be complete.

    Returns:
        The payload of a Success, Some or Value.

    Raises:
        Halt: On Failure, Nothing or Error; the enclosing scope returns that value.
        UnsupportedMonadError: If ``container`` is not a bindable container.
        DoScopeError: If called outside of a Do scope.
        BlockingBindError: If given a pending Task on an event loop thread;
            ``await`` the task first.
    """
    if isinstance(container, Task):
        if not container.is_complete() and _on_event_loop():
            raise BlockingBindError(container)
        container = container.wait()

    if not isinstance(container, Success | Failure | Some | NothingType | Value | Error):
        raise UnsupportedMonadError(container)

    ctx = _current.get()
    if ctx is None:
        raise DoScopeError(container)
    if ctx.halted:
        # A previous halt was swallowed by user code; keep stopping.
        ctx.halt(ctx.halted_with)

    match container:
        case Success(value) | Some(value) | Value(value):
            return value
        case _:
            ctx.halt(container)


def _on_event_loop() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def _finish(ctx: DoContext, result: Any) -> Any:
    if ctx.halted:
        return ctx.halted_with
    return result


def _run_scope[**P, T](fn: Callable[P, T], /, *args: P.args, **kwargs: P.kwargs) -> Any:
    ctx = DoContext()
    token = _current.set(ctx)
    try:
        result = fn(*args, **kwargs)
    except Halt as halt:
        if halt.context is not ctx:
            raise
        return ctx.halted_with
    finally:
        _current.reset(token)
    return _finish(ctx, result)


async def _run_scope_async[**P, T](fn: Callable[P, Awaitable[T]], /, *args: P.args, **kwargs: P.kwargs) -> Any:
    ctx = DoContext()
    token = _current.set(ctx)
    try:
        result = await fn(*args, **kwargs)
    except Halt as halt:
        if halt.context is not ctx:
            raise
        return ctx.halted_with
    finally:
        _current.reset(token)
    return _finish(ctx, result)


def Do(fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:  # noqa: N802
    """Run ``fn`` inside a fresh Do scope and return its outcome.

    If a ``bind`` inside ``fn`` meets a failure-like container, that container
    is returned; otherwise whatever ``fn`` returned is returned unchanged. For
    a coroutine function the result is an awaitable.

    Example:
        ```python
        Do(lambda: Success(bind(Success(1)) + bind(Success(2))))
        # Success(value=3)
        Do(lambda: Success(bind(Failure('x')) + 1))
        # Failure(error='x')
        ```
    """
    if inspect.iscoroutinefunction(fn):
        return _run_scope_async(fn, *args, **kwargs)
    return _run_scope(fn, *args, **kwargs)


def do(func: Callable[P, T]) -> Callable[P, T]:
    """Decorator that runs every call of ``func`` in its own Do scope.

    Automatically detects async functions and handles them appropriately.

    Example:
        ```python
        @do
        def create_account(data) -> Result[Account, str]:
            values = bind(validate(data))
            account = bind(repo.insert(values))
            return Success(account)
        ```
    """
    if inspect.iscoroutinefunction(func):

        @wrapt.decorator
        async def async_wrapper(
            wrapped: Callable[..., Awaitable[Any]],
            instance: Any,
            args: tuple[Any, ...],
            kwargs: dict[str, Any],
        ) -> Any:
            return await _run_scope_async(wrapped, *args, **kwargs)

        return async_wrapper(func)  # type: ignore[return-value]

    @wrapt.decorator
    def sync_wrapper(
        wrapped: Callable[..., Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        return _run_scope(wrapped, *args, **kwargs)

    return sync_wrapper(func)  # type: ignore[return-value]


def do_for[C: type](*method_names: str) -> Callable[[C], C]:
    """Class decorator that wraps the named methods with ``do``.

    Example:
        ```python
        @do_for('call', 'retry')
        class CreateUser:
            def call(self, data):
                ...
        ```
    """
    if not method_names:
        msg = 'do_for needs at least one method name'
        raise TypeError(msg)

    def decorate(cls: C) -> C:
        for name in method_names:
            _wrap_method(cls, name)
        return cls

    return decorate


def _wrap_method(cls: type, name: str) -> None:
    attr = cls.__dict__.get(name)
    if attr is None:
        attr = getattr(cls, name, None)
    if not inspect.isfunction(attr):
        msg = f'{cls.__name__}.{name} is not a plain method'
        raise TypeError(msg)
    setattr(cls, name, do(attr))


class DoForCall:
    """Mixin that runs the ``call`` method of every subclass in a Do scope.

    Example:
        ```python
        class FindUser(DoForCall):
            def call(self, user_id):
                user = bind(self.repo.find(user_id))
                return Success(user)
        ```
    """

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if 'call' in cls.__dict__:
            _wrap_method(cls, 'call')
