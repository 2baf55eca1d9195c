"""Tests for coerce, sequence and traverse."""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from monadkit import (
    Error,
    Failure,
    Invalid,
    Nothing,
    Some,
    Success,
    Try,
    UnsupportedMonadError,
    Valid,
    Value,
    coerce,
    sequence,
    traverse,
)


class TestCoerce:
    """Tests for coerce."""

    def test_none_is_empty(self):
        assert coerce(None) == []

    def test_iterables(self):
        assert coerce((1, 2)) == [1, 2]
        assert coerce({'a': 1}) == ['a']
        assert coerce(x for x in range(3)) == [0, 1, 2]

    def test_list_is_copied(self):
        original = [1]
        assert coerce(original) is not original

    @pytest.mark.parametrize('value', ['text', b'bytes', 42, 1.5, object()])
    def test_rejects_scalars_and_strings(self, value):
        with pytest.raises(TypeError):
            coerce(value)


class TestSequence:
    """Tests for sequence."""

    def test_results(self):
        assert sequence([Success(1), Success(2)]) == Success([1, 2])
        assert sequence([Success(1), Failure('a'), Failure('b')]) == Failure('a')

    def test_maybes(self):
        assert sequence([Some(1), Some(2)]) == Some([1, 2])
        assert sequence([Some(1), Nothing]) is Nothing

    def test_tries(self):
        err = Error(ValueError('x'))
        assert sequence([Value(1), Value(2)]) == Value([1, 2])
        assert sequence([Value(1), err]) is err

    def test_validated_accumulates(self):
        """Every Invalid contributes its errors; lists are flattened."""
        assert sequence([Valid(1), Valid(2)]) == Valid([1, 2])
        assert sequence([Valid(1), Invalid('a'), Invalid(['b', 'c'])]) == Invalid(['a', 'b', 'c'])

    def test_empty(self):
        assert sequence([]) == Success([])

    def test_short_circuit_stops_consuming(self):
        consumed = []

        def items():
            for r in (Success(1), Failure('stop'), Success(3)):
                consumed.append(r)
                yield r

        assert sequence(items()) == Failure('stop')
        assert len(consumed) == 2

    def test_mixed_families_rejected(self):
        with pytest.raises(TypeError):
            sequence([Success(1), Some(2)])

    def test_non_container_rejected(self):
        with pytest.raises(UnsupportedMonadError):
            sequence([Success(1), 2])

    @given(st.lists(st.integers(), max_size=20))
    def test_all_success_keeps_order(self, xs):
        assert sequence([Success(x) for x in xs]) == Success(xs)


class TestTraverse:
    """Tests for traverse."""

    def test_traverse_try(self):
        assert traverse(['1', '2'], lambda s: Try(lambda: int(s))) == Value([1, 2])
        assert traverse(['1', 'x'], lambda s: Try(lambda: int(s))).is_error()

    def test_traverse_stops_calling_after_failure(self):
        calls = []

        def check(x):
            calls.append(x)
            return Success(x) if x > 0 else Failure(f'bad {x}')

        assert traverse([1, -1, 2], check) == Failure('bad -1')
        assert calls == [1, -1]

    def test_traverse_validated(self):
        def check(x):
            return Valid(x) if x > 0 else Invalid(f'bad {x}')

        assert traverse([1, -1, -2], check) == Invalid(['bad -1', 'bad -2'])
