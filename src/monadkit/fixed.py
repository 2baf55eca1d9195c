"""Fixed-error Result: a Result whose Failure payload is checked on construction.

``Result(error_spec)`` returns a pair of constructors. ``Success`` is the plain
one; ``Failure`` refuses any payload the spec does not match by raising
``TypeMismatchError``. An error spec can be:

- an object with a ``matches(value) -> bool`` method,
- a class, tuple of classes or union of classes such as
  ``KeyError | ValueError`` (``isinstance``),
- another typing construct such as ``Literal['a', 'b']``,
  ``Literal['timeout'] | int`` or ``Annotated[int, msgspec.Meta(gt=0)]``,
  checked with ``msgspec.convert`` in strict mode,
- a set or frozenset of allowed values,
- any other callable, used as a predicate.

Example:
    ```python
    from typing import Literal

    from monadkit import Result

    AccountResult = Result(Literal['user_not_found', 'account_not_found'], exhaustive=True)

    def find_account(account_id):
        account = repo.find(account_id)
        if account is None:
            return AccountResult.Failure('account_not_found')
        return AccountResult.Success(account)
    ```
"""

from __future__ import annotations

import contextlib
import enum
import types
import typing
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import msgspec

from monadkit.errors import TypeMismatchError
from monadkit.result import Failure, Success

__all__ = ['ErrorSpec', 'FixedResult', 'Result', 'error_spec']


@runtime_checkable
class ErrorSpec(Protocol):
    """Anything that can decide whether a failure payload is allowed."""

    def matches(self, value: Any) -> bool: ...


class _InstanceOf(msgspec.Struct, frozen=True):
    types: tuple[type, ...]

    def matches(self, value: Any) -> bool:
        return isinstance(value, self.types)


class _Conforms(msgspec.Struct, frozen=True):
    """Validate against a type annotation with msgspec."""

    annotation: Any

    def matches(self, value: Any) -> bool:
        try:
            msgspec.convert(value, type=self.annotation, strict=True)
        except msgspec.ValidationError:
            return False
        return True


class _OneOf(msgspec.Struct, frozen=True):
    values: frozenset[Any]

    def matches(self, value: Any) -> bool:
        try:
            return value in self.values
        except TypeError:
            # Unhashable payloads can't be members.
            return False


class _Satisfies(msgspec.Struct, frozen=True):
    predicate: Callable[[Any], bool]

    def matches(self, value: Any) -> bool:
        return bool(self.predicate(value))


def _is_typing_construct(spec: Any) -> bool:
    return isinstance(spec, types.UnionType) or typing.get_origin(spec) is not None


def _is_plain_class(spec: Any) -> bool:
    return isinstance(spec, type) and typing.get_origin(spec) is None


def _union_classes(spec: Any) -> tuple[type, ...] | None:
    """Return the members of a union made only of plain classes, else None."""
    if not (isinstance(spec, types.UnionType) or typing.get_origin(spec) is typing.Union):
        return None
    members = typing.get_args(spec)
    if all(_is_plain_class(member) for member in members):
        return members
    return None


def _conforms(annotation: Any) -> _Conforms:
    # Translating the annotation raises TypeError for forms msgspec cannot
    # validate; only the value check may fail here.
    with contextlib.suppress(msgspec.ValidationError):
        msgspec.convert(None, type=annotation, strict=True)
    return _Conforms(annotation)


def error_spec(spec: Any) -> ErrorSpec:
    """Normalize any accepted error spec into an object with ``matches``.

    Unions of plain classes (``KeyError | ValueError``) become isinstance
    checks; other typing constructs are validated with msgspec.

    Raises:
        TypeError: If the spec is not an accepted form, or is a typing
            construct msgspec cannot validate.
    """
    if isinstance(spec, ErrorSpec) and not isinstance(spec, type):
        return spec
    classes = _union_classes(spec)
    if classes is not None:
        return _InstanceOf(classes)
    if _is_typing_construct(spec):
        return _conforms(spec)
    if isinstance(spec, type):
        return _InstanceOf((spec,))
    if isinstance(spec, tuple) and spec and all(isinstance(t, type) for t in spec):
        return _InstanceOf(spec)
    if isinstance(spec, set | frozenset):
        return _OneOf(frozenset(spec))
    if callable(spec):
        return _Satisfies(spec)
    msg = f'unsupported error spec: {spec!r}'
    raise TypeError(msg)


def _enumerate(spec: Any) -> tuple[Any, ...] | None:
    """Return the closed set of values a spec allows, or None if it is open."""
    if typing.get_origin(spec) is typing.Literal:
        return typing.get_args(spec)
    if isinstance(spec, type) and issubclass(spec, enum.Enum):
        return tuple(spec)
    if isinstance(spec, set | frozenset):
        return tuple(spec)
    return None


class FixedResult[E](msgspec.Struct, frozen=True):
    """A pair of Result constructors whose Failure is restricted by a spec.

    Attributes:
        spec: The normalized error spec.
        allowed: Every allowed failure value for exhaustive specs, else None.
    """

    spec: ErrorSpec
    allowed: tuple[Any, ...] | None = None

    def Success[T](self, value: T) -> Success[T]:  # noqa: N802
        """Build a Success; identical to the plain constructor."""
        return Success(value)

    def Failure(self, value: E) -> Failure[E]:  # noqa: N802
        """Build a Failure, refusing payloads the spec doesn't match.

        Raises:
            TypeMismatchError: If ``value`` does not satisfy the error spec.
        """
        if not self.spec.matches(value):
            raise TypeMismatchError(value, self.spec)
        return Failure(value)

    def matches(self, value: Any) -> bool:
        """Check a payload against the spec without building a Failure."""
        return self.spec.matches(value)


def Result(spec: Any, *, exhaustive: bool = False) -> FixedResult[Any]:  # noqa: N802
    """Create Success/Failure constructors with the failure type fixed.

    Args:
        spec: The error spec (see module docs for accepted forms).
        exhaustive: Require the spec to enumerate a closed set of values
            (a ``Literal``, an ``Enum`` subclass or a set).

    Returns:
        A FixedResult exposing ``Success`` and ``Failure``.

    Raises:
        TypeError: If the spec is unsupported, or open while ``exhaustive`` is set.
    """
    allowed = _enumerate(spec)
    if exhaustive and allowed is None:
        msg = f'exhaustive Result needs a Literal, Enum or set of values, got {spec!r}'
        raise TypeError(msg)
    return FixedResult(spec=error_spec(spec), allowed=allowed)
