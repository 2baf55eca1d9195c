"""Validated type: Valid[T] | Invalid[E] for reporting validation outcomes.

Validated is shaped like Result but is meant for collecting problems rather
than for control flow: ``apply`` and ``monadkit.collection.sequence`` keep
going past the first ``Invalid`` and concatenate every error they meet.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, NoReturn, TypeIs

import msgspec

from monadkit.errors import UnwrapError

if TYPE_CHECKING:
    from monadkit.result import Failure, Success

__all__ = ['Invalid', 'Valid', 'ValidatedT']


def _concat(left: Any, right: Any) -> Any:
    if isinstance(left, list | tuple) and isinstance(right, list | tuple):
        return [*left, *right]
    if isinstance(left, list | tuple):
        return [*left, right]
    if isinstance(right, list | tuple):
        return [left, *right]
    return [left, right]


class Valid[T](msgspec.Struct, frozen=True, gc=False):
    """Valid variant of Validated holding the validated value."""

    value: T

    def is_valid(self) -> TypeIs[Valid[T]]:
        """Return True since this is Valid."""
        return True

    def is_invalid(self) -> TypeIs[Invalid[object]]:
        """Return False since this is Valid."""
        return False

    def map[U](self, f: Callable[[T], U]) -> Valid[U]:
        """Apply a function to the validated value."""
        return Valid(f(self.value))

    def map_invalid[F](self, _f: Callable[[Any], F]) -> Valid[T]:
        """Return self unchanged since this is Valid."""
        return self

    def bind[U, E](self, f: Callable[[T], Valid[U] | Invalid[E]]) -> Valid[U] | Invalid[E]:
        """Chain a validation that depends on the value."""
        return f(self.value)

    def fold[U](self, on_invalid: Callable[[Any], U], on_valid: Callable[[T], U]) -> U:  # noqa: ARG002
        """Eliminate the Validated by calling ``on_valid`` with the value."""
        return on_valid(self.value)

    def apply[A, U, E](self: Valid[Callable[[A], U]], other: Valid[A] | Invalid[E]) -> Valid[U] | Invalid[E]:
        """Apply the wrapped function to another Validated's value.

        ``Valid(f).apply(Valid(x))`` is ``Valid(f(x))``; an ``Invalid``
        argument is returned as is.
        """
        if isinstance(other, Valid):
            return Valid(self.value(other.value))
        return other

    def value_or(self, _default: T) -> T:
        """Return the validated value, ignoring the default."""
        return self.value

    def unwrap(self) -> T:
        """Return the validated value."""
        return self.value

    def to_result(self) -> Success[T]:
        """Convert to Result, returning Success(value)."""
        from monadkit.result import Success

        return Success(self.value)


class Invalid[E](msgspec.Struct, frozen=True, gc=False):
    """Invalid variant of Validated holding the validation error(s)."""

    error: E

    def is_valid(self) -> TypeIs[Valid[object]]:
        """Return False since this is Invalid."""
        return False

    def is_invalid(self) -> TypeIs[Invalid[E]]:
        """Return True since this is Invalid."""
        return True

    def map[T, U](self, _f: Callable[[T], U]) -> Invalid[E]:
        """Return self unchanged since this is Invalid."""
        return self

    def map_invalid[F](self, f: Callable[[E], F]) -> Invalid[F]:
        """Apply a function to the error(s)."""
        return Invalid(f(self.error))

    def bind[T, U](self, _f: Callable[[T], Valid[U] | Invalid[E]]) -> Invalid[E]:
        """Return self unchanged since this is Invalid."""
        return self

    def fold[U](self, on_invalid: Callable[[E], U], on_valid: Callable[[Any], U]) -> U:  # noqa: ARG002
        """Eliminate the Validated by calling ``on_invalid`` with the error(s)."""
        return on_invalid(self.error)

    def apply(self, other: Valid[Any] | Invalid[Any]) -> Invalid[Any]:
        """Combine with another Validated, accumulating errors.

        ``Invalid(a).apply(Invalid(b))`` is ``Invalid([a, b])`` (lists are
        flattened one level); a ``Valid`` argument leaves self unchanged.
        """
        if isinstance(other, Invalid):
            return Invalid(_concat(self.error, other.error))
        return self

    def value_or[T](self, default: T) -> T:
        """Return the default since there is no value."""
        return default

    def unwrap(self) -> NoReturn:
        """Raise UnwrapError since there is no value."""
        raise UnwrapError(self)

    def to_result(self) -> Failure[E]:
        """Convert to Result, returning Failure(error)."""
        from monadkit.result import Failure

        return Failure(self.error)


type ValidatedT[T, E] = Valid[T] | Invalid[E]
