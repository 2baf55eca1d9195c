"""Collection helpers: coerce values to lists, sequence and traverse containers."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from monadkit.errors import UnsupportedMonadError
from monadkit.maybe import NothingType, Some
from monadkit.result import Failure, Success
from monadkit.try_ import Error, Value
from monadkit.validated import Invalid, Valid

__all__ = ['coerce', 'sequence', 'traverse']

# (success variant, failure variant) per family.
_FAMILIES: tuple[tuple[type, type], ...] = (
    (Success, Failure),
    (Some, NothingType),
    (Value, Error),
    (Valid, Invalid),
)


def coerce(value: Any) -> list[Any]:
    """Turn ``value`` into a list.

    Examples:
        >>> coerce(None)
        []
        >>> coerce((1, 2))
        [1, 2]
        >>> coerce('abc')
        Traceback (most recent call last):
        ...
        TypeError: cannot coerce 'abc' to a list

    Raises:
        TypeError: For strings, bytes and anything that is not iterable.
    """
    if value is None:
        return []
    if isinstance(value, str | bytes | bytearray) or not isinstance(value, Iterable):
        msg = f'cannot coerce {value!r} to a list'
        raise TypeError(msg)
    return list(value)


def _family(container: Any) -> tuple[type, type]:
    for family in _FAMILIES:
        if isinstance(container, family):
            return family
    raise UnsupportedMonadError(container)


def sequence(containers: Iterable[Any]) -> Any:
    """Turn an iterable of containers into one container of a list.

    All containers must belong to one family. Result, Maybe and Try stop at
    the first failure and return it. Validated goes through every item and
    returns ``Invalid`` with all errors gathered in one list. An empty iterable
    gives ``Success([])``.

    Examples:
        >>> sequence([Success(1), Success(2)])
        Success(value=[1, 2])
        >>> sequence([Some(1), Nothing, Some(3)])
        Nothing
        >>> sequence([Valid(1), Invalid('a'), Invalid(['b', 'c'])])
        Invalid(error=['a', 'b', 'c'])

    Raises:
        UnsupportedMonadError: If an item is not a container.
        TypeError: If items from different families are mixed.
    """
    family: tuple[type, type] | None = None
    values: list[Any] = []
    errors: list[Any] = []
    for container in containers:
        current = _family(container)
        if family is None:
            family = current
        elif current is not family:
            msg = f'cannot sequence {type(container).__name__} with {family[0].__name__}'
            raise TypeError(msg)

        match container:
            case Success(value) | Some(value) | Value(value) | Valid(value):
                values.append(value)
            case Invalid(error):
                if isinstance(error, list | tuple):
                    errors.extend(error)
                else:
                    errors.append(error)
            case _:
                return container

    if errors:
        return Invalid(errors)
    if family is None:
        return Success(values)
    return family[0](values)


def traverse[U](items: Iterable[U], f: Callable[[U], Any]) -> Any:
    """Map ``f`` over ``items`` and sequence the containers it returns.

    Short-circuiting families stop calling ``f`` after the first failure.

    Examples:
        >>> traverse([1, 2], lambda x: Success(x * 10))
        Success(value=[10, 20])
    """
    return sequence(f(item) for item in items)

