"""Result type: Success[T] | Failure[E] for explicit error handling."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn, TypeIs

import msgspec

from monadkit.errors import UnwrapError

if TYPE_CHECKING:
    from monadkit.maybe import NothingType, Some
    from monadkit.validated import Invalid, Valid

__all__ = ['Failure', 'Result', 'Success']


class Success[T](msgspec.Struct, frozen=True, gc=False):
    """Success variant of Result containing a value of type T.

    Success represents the successful outcome of an operation. It wraps a value
    that can be transformed or chained through Result-returning operations.

    Examples:
        >>> Success(42).map(lambda x: x * 2)
        Success(value=84)
        >>> Success(2).bind(lambda x: Success(x + 1))
        Success(value=3)
    """

    value: T

    def is_success(self) -> TypeIs[Success[T]]:
        """Return True since this is Success."""
        return True

    def is_failure(self) -> TypeIs[Failure[object]]:
        """Return False since this is Success."""
        return False

    def map[U](self, f: Callable[[T], U]) -> Success[U]:
        """Apply a function to the contained value.

        Args:
            f: Function to apply to the Success value.

        Returns:
            Success containing the result of applying f to the value.
        """
        return Success(f(self.value))

    def map_failure[F](self, _f: Callable[[Any], F]) -> Success[T]:
        """Return self unchanged since this is Success."""
        return self

    def bind[U, E](self, f: Callable[[T], Success[U] | Failure[E]]) -> Success[U] | Failure[E]:
        """Apply a function that returns a Result to the contained value.

        Also known as flatmap or and_then.

        Args:
            f: Function that takes T and returns Result[U, E].

        Returns:
            The Result returned by f.
        """
        return f(self.value)

    def fold[U](self, on_failure: Callable[[Any], U], on_success: Callable[[T], U]) -> U:  # noqa: ARG002
        """Eliminate the Result by calling ``on_success`` with the value."""
        return on_success(self.value)

    def or_else[F](self, _f: Callable[[Any], Success[T] | Failure[F]]) -> Success[T]:
        """Return self unchanged since this is Success."""
        return self

    def flip(self) -> Failure[T]:
        """Swap the variants: Success(v) becomes Failure(v)."""
        return Failure(self.value)

    def flatten[U, E](self: Success[Success[U] | Failure[E]]) -> Success[U] | Failure[E]:
        """Flatten a nested Result.

        Converts Result[Result[T, E], E] into Result[T, E].
        """
        return self.value

    def value_or(self, _default: T) -> T:
        """Return the contained value, ignoring the default."""
        return self.value

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def to_maybe(self) -> Some[T] | NothingType:
        """Convert to Maybe; a None value becomes Nothing."""
        from monadkit.maybe import Maybe

        return Maybe(self.value)

    def to_validated(self) -> Valid[T]:
        """Convert to Validated, returning Valid(value)."""
        from monadkit.validated import Valid

        return Valid(self.value)

    def bail(self) -> T:
        """Return the contained value; the method form of ``bind(success)`` in a Do scope."""
        from monadkit.do import bind

        return bind(self)


class Failure[E](msgspec.Struct, frozen=True, gc=False):
    """Failure variant of Result containing an error of type E.

    The error can be any value: an exception, a symbol-like string, an enum
    member or a struct describing what went wrong.

    Examples:
        >>> err = Failure('not_found')
        >>> err.map(lambda x: x * 2)
        Failure(error='not_found')
        >>> err.value_or(0)
        0
    """

    error: E

    def is_success(self) -> TypeIs[Success[object]]:
        """Return False since this is Failure."""
        return False

    def is_failure(self) -> TypeIs[Failure[E]]:
        """Return True since this is Failure."""
        return True

    def map[T, U](self, _f: Callable[[T], U]) -> Failure[E]:
        """Return self unchanged since this is Failure."""
        return self

    def map_failure[F](self, f: Callable[[E], F]) -> Failure[F]:
        """Apply a function to the contained error.

        Args:
            f: Function to apply to the error value.

        Returns:
            Failure containing the transformed error.
        """
        return Failure(f(self.error))

    def bind[T, U](self, _f: Callable[[T], Success[U] | Failure[E]]) -> Failure[E]:
        """Return self unchanged since this is Failure."""
        return self

    def fold[U](self, on_failure: Callable[[E], U], on_success: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Eliminate the Result by calling ``on_failure`` with the error."""
        return on_failure(self.error)

    def or_else[T, F](self, f: Callable[[E], Success[T] | Failure[F]]) -> Success[T] | Failure[F]:
        """Apply a recovery function to the error.

        Args:
            f: Function that takes the error and returns a new Result.

        Returns:
            The Result returned by f.
        """
        return f(self.error)

    def flip(self) -> Success[E]:
        """Swap the variants: Failure(e) becomes Success(e)."""
        return Success(self.error)

    def flatten(self) -> Failure[E]:
        """Return self since this is Failure (nothing to flatten)."""
        return self

    def value_or[T](self, default: T) -> T:
        """Return the default value since this is Failure."""
        return default

    def unwrap(self) -> NoReturn:
        """Raise UnwrapError since Failure has no success value."""
        raise UnwrapError(self)

    def to_maybe(self) -> NothingType:
        """Convert to Maybe, returning Nothing."""
        from monadkit.maybe import Nothing

        return Nothing

    def to_validated(self) -> Invalid[E]:
        """Convert to Validated, returning Invalid(error)."""
        from monadkit.validated import Invalid

        return Invalid(self.error)

    def bail(self) -> NoReturn:
        """Halt the enclosing Do scope with this Failure."""
        from monadkit.do import bind

        return bind(self)


type Result[T, E = Exception] = Success[T] | Failure[E]
