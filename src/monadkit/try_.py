"""Try type: Value[T] | Error for computations that may raise.

``Try`` runs a computation and captures the exceptions you list. Anything not
listed propagates, so a bug in the computation is not silently turned into a
value.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn, ParamSpec, TypeIs, TypeVar, overload

import msgspec
import wrapt

from monadkit.errors import UnwrapError

if TYPE_CHECKING:
    from monadkit.maybe import NothingType, Some
    from monadkit.result import Failure, Success

__all__ = ['DEFAULT_EXCEPTIONS', 'Error', 'Try', 'TryT', 'Value', 'attempt']

P = ParamSpec('P')
T = TypeVar('T')

DEFAULT_EXCEPTIONS: tuple[type[BaseException], ...] = (Exception,)
"""Exceptions captured when no allow-list is given."""

type ExceptionSpec = type[BaseException] | tuple[type[BaseException], ...] | list[type[BaseException]]


class Value[T](msgspec.Struct, frozen=True, gc=False):
    """Value variant of Try: the computation returned normally."""

    value: T

    def is_value(self) -> TypeIs[Value[T]]:
        """Return True since this is Value."""
        return True

    def is_error(self) -> TypeIs[Error]:
        """Return False since this is Value."""
        return False

    def map[U](self, f: Callable[[T], U]) -> Value[U]:
        """Apply a function to the contained value."""
        return Value(f(self.value))

    def bind[U](self, f: Callable[[T], Value[U] | Error]) -> Value[U] | Error:
        """Apply a function that returns a Try to the contained value."""
        return f(self.value)

    def fold[U](self, on_error: Callable[[BaseException], U], on_value: Callable[[T], U]) -> U:  # noqa: ARG002
        """Eliminate the Try by calling ``on_value`` with the value."""
        return on_value(self.value)

    def recover(self, _f: Callable[[BaseException], T]) -> Value[T]:
        """Return self unchanged since this is Value."""
        return self

    def value_or(self, _default: T) -> T:
        """Return the contained value, ignoring the default."""
        return self.value

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def to_result(self) -> Success[T]:
        """Convert to Result, returning Success(value)."""
        from monadkit.result import Success

        return Success(self.value)

    def to_maybe(self) -> Some[T] | NothingType:
        """Convert to Maybe; a None value becomes Nothing."""
        from monadkit.maybe import Maybe

        return Maybe(self.value)

    def bail(self) -> T:
        """Return the contained value; the method form of ``bind(value)`` in a Do scope."""
        from monadkit.do import bind

        return bind(self)


class Error(msgspec.Struct, frozen=True, gc=False):
    """Error variant of Try holding the captured exception."""

    exception: BaseException

    def __post_init__(self) -> None:
        if not isinstance(self.exception, BaseException):
            msg = f'Error expects an exception instance, got {self.exception!r}'
            raise TypeError(msg)

    def is_value(self) -> TypeIs[Value[object]]:
        """Return False since this is Error."""
        return False

    def is_error(self) -> TypeIs[Error]:
        """Return True since this is Error."""
        return True

    def map[T, U](self, _f: Callable[[T], U]) -> Error:
        """Return self unchanged since this is Error."""
        return self

    def bind[T, U](self, _f: Callable[[T], Value[U] | Error]) -> Error:
        """Return self unchanged since this is Error."""
        return self

    def fold[U](self, on_error: Callable[[BaseException], U], on_value: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Eliminate the Try by calling ``on_error`` with the exception."""
        return on_error(self.exception)

    def recover[T](self, f: Callable[[BaseException], T]) -> Value[T]:
        """Turn the captured exception into a Value."""
        return Value(f(self.exception))

    def value_or[T](self, default: T) -> T:
        """Return the default value since this is Error."""
        return default

    def unwrap(self) -> NoReturn:
        """Raise UnwrapError chained to the captured exception."""
        raise UnwrapError(self) from self.exception

    def to_result(self) -> Failure[BaseException]:
        """Convert to Result, returning Failure(exception)."""
        from monadkit.result import Failure

        return Failure(self.exception)

    def to_maybe(self) -> NothingType:
        """Convert to Maybe, returning Nothing."""
        from monadkit.maybe import Nothing

        return Nothing

    def bail(self) -> NoReturn:
        """Halt the enclosing Do scope with this Error."""
        from monadkit.do import bind

        return bind(self)


type TryT[T] = Value[T] | Error


def _normalize_exceptions(exceptions: ExceptionSpec | None) -> tuple[type[BaseException], ...]:
    if exceptions is None:
        return DEFAULT_EXCEPTIONS
    if isinstance(exceptions, type):
        exceptions = (exceptions,)
    catch = tuple(exceptions)
    if not catch:
        return DEFAULT_EXCEPTIONS
    for exc_type in catch:
        if not (isinstance(exc_type, type) and issubclass(exc_type, BaseException)):
            msg = f'Try expects exception classes, got {exc_type!r}'
            raise TypeError(msg)
    return catch


@overload
def Try[T](fn: Callable[[], T], /) -> Value[T] | Error: ...


@overload
def Try[T](exceptions: ExceptionSpec, fn: Callable[[], T], /) -> Value[T] | Error: ...


def Try(*args: Any) -> Value[Any] | Error:  # noqa: N802
    """Run a computation, capturing listed exceptions as Error.

    Called as ``Try(fn)`` it captures any ``Exception``. Called as
    ``Try(exceptions, fn)`` it captures only the given exception class, tuple
    or list of classes; any other exception propagates to the caller.

    Examples:
        >>> Try(ZeroDivisionError, lambda: 1 / 0)
        Error(exception=ZeroDivisionError('division by zero'))
        >>> Try(lambda: 2 + 2)
        Value(value=4)
    """
    if len(args) == 1:
        exceptions, fn = None, args[0]
    elif len(args) == 2:  # noqa: PLR2004
        exceptions, fn = args
    else:
        msg = f'Try takes (fn) or (exceptions, fn), got {len(args)} arguments'
        raise TypeError(msg)

    if not callable(fn):
        msg = f'Try expects a callable computation, got {fn!r}'
        raise TypeError(msg)

    catch = _normalize_exceptions(exceptions)
    try:
        return Value(fn())
    except catch as e:
        return Error(e)


@overload
def attempt[**P, T](
    func: Callable[P, T],
) -> Callable[P, Value[T] | Error]: ...


@overload
def attempt(
    func: None = None,
    *,
    exceptions: ExceptionSpec | None = None,
) -> Callable[[Callable[P, T]], Callable[P, Value[T] | Error]]: ...


def attempt(
    func: Callable[..., Any] | None = None,
    *,
    exceptions: ExceptionSpec | None = None,
) -> Any:
    """Decorator that runs a function through ``Try``.

    Can be used with or without arguments:
        @attempt
        def risky(): ...

        @attempt(exceptions=(ValueError, KeyError))
        def specific(): ...

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Exception classes to capture. Defaults to (Exception,).

    Returns:
        A wrapped function that returns Value(result) or Error(exception).
    """
    catch = _normalize_exceptions(exceptions)

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., Any],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Value[Any] | Error:
        try:
            return Value(wrapped(*args, **kwargs))
        except catch as e:
            return Error(e)

    if func is not None:
        return wrapper(func)
    return wrapper
