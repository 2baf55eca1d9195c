"""Maybe type: Some[T] | Nothing for optional values."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn, TypeIs

import msgspec

from monadkit.errors import UnwrapError

if TYPE_CHECKING:
    from monadkit.result import Failure, Success

__all__ = ['Maybe', 'MaybeT', 'Nothing', 'NothingType', 'Some', 'none']


class Some[T](msgspec.Struct, frozen=True, gc=False):
    """Some variant of Maybe containing a value of type T.

    Some never holds ``None``: constructing ``Some(None)`` raises
    ``ValueError``. Use ``Maybe(value)`` to build an optional from a value
    that may be ``None``.

    Examples:
        >>> Some(42).map(lambda x: x * 2)
        Some(value=84)
        >>> Some(42).fold(lambda: 0, lambda x: x + 1)
        43
    """

    value: T

    def __post_init__(self) -> None:
        if self.value is None:
            msg = 'Some cannot hold None; use Maybe(value) or Nothing'
            raise ValueError(msg)

    def is_some(self) -> TypeIs[Some[T]]:
        """Return True since this is Some."""
        return True

    def is_none(self) -> TypeIs[NothingType]:
        """Return False since this is Some."""
        return False

    def map[U](self, f: Callable[[T], U]) -> Some[U]:
        """Apply a function to the contained value.

        Args:
            f: Function to apply to the Some value. It must not return None.

        Returns:
            Some containing the result of applying f to the value.

        Raises:
            ValueError: If f returns None. Use ``maybe`` for that case.
        """
        return Some(f(self.value))

    def maybe[U](self, f: Callable[[T], U | None]) -> Some[U] | NothingType:
        """Apply a function and coerce a None result into Nothing."""
        return Maybe(f(self.value))

    def bind[U](self, f: Callable[[T], Some[U] | NothingType]) -> Some[U] | NothingType:
        """Apply a function that returns a Maybe to the contained value.

        Also known as flatmap or and_then.

        Args:
            f: Function that takes T and returns Maybe[U].

        Returns:
            The Maybe returned by f.
        """
        return f(self.value)

    def fold[U](self, on_none: Callable[[], U], on_some: Callable[[T], U]) -> U:  # noqa: ARG002
        """Eliminate the Maybe by calling ``on_some`` with the value."""
        return on_some(self.value)

    def filter(self, predicate: Callable[[T], bool]) -> Some[T] | NothingType:
        """Return self if the predicate holds for the value, else Nothing."""
        if predicate(self.value):
            return self
        return Nothing

    def or_else(self, _f: Callable[[], Some[T] | NothingType]) -> Some[T]:
        """Return self unchanged since this is Some."""
        return self

    def value_or(self, _default: T) -> T:
        """Return the contained value, ignoring the default."""
        return self.value

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def to_result[E](self, _error: E) -> Success[T]:
        """Convert to Result, returning Success(value)."""
        from monadkit.result import Success

        return Success(self.value)

    def bail(self) -> T:
        """Return the contained value; the method form of ``bind(some)`` in a Do scope."""
        from monadkit.do import bind

        return bind(self)


class NothingType(msgspec.Struct, frozen=True, gc=False):
    """Nothing variant of Maybe representing absence of a value.

    This is a singleton in practice - use the ``Nothing`` constant instead of
    instantiating directly. All instances compare equal.
    """

    def is_some(self) -> TypeIs[Some[object]]:
        """Return False since this is Nothing."""
        return False

    def is_none(self) -> TypeIs[NothingType]:
        """Return True since this is Nothing."""
        return True

    def map[T, U](self, _f: Callable[[T], U]) -> NothingType:
        """Return Nothing since there's no value to map."""
        return self

    def maybe[T, U](self, _f: Callable[[T], U | None]) -> NothingType:
        """Return Nothing since there's no value to map."""
        return self

    def bind[T, U](self, _f: Callable[[T], Some[U] | NothingType]) -> NothingType:
        """Return Nothing since there's no value to bind."""
        return self

    def fold[U](self, on_none: Callable[[], U], on_some: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Eliminate the Maybe by calling ``on_none`` with no arguments."""
        return on_none()

    def filter[T](self, _predicate: Callable[[T], bool]) -> NothingType:
        """Return Nothing since there's no value to filter."""
        return self

    def or_else[T](self, f: Callable[[], Some[T] | NothingType]) -> Some[T] | NothingType:
        """Return the Maybe produced by the recovery function."""
        return f()

    def value_or[T](self, default: T) -> T:
        """Return the default value since this is Nothing."""
        return default

    def unwrap(self) -> NoReturn:
        """Raise UnwrapError since Nothing has no value."""
        raise UnwrapError(self)

    def to_result[E](self, error: E) -> Failure[E]:
        """Convert to Result, returning Failure(error)."""
        from monadkit.result import Failure

        return Failure(error)

    def bail(self) -> NoReturn:
        """Halt the enclosing Do scope with Nothing."""
        from monadkit.do import bind

        return bind(self)

    def __repr__(self) -> str:
        return 'Nothing'


Nothing: NothingType = NothingType()
"""Singleton instance representing the absence of a value."""


type MaybeT[T] = Some[T] | NothingType


def Maybe[T](value: T | None) -> Some[T] | NothingType:  # noqa: N802
    """Build a Maybe from a value that may be None.

    Examples:
        >>> Maybe(1)
        Some(value=1)
        >>> Maybe(None)
        Nothing
    """
    if value is None:
        return Nothing
    return Some(value)


def none() -> NothingType:
    """Return the Nothing constant."""
    return Nothing
