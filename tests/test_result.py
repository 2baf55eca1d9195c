"""Tests for Result (Success and Failure)."""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from monadkit import Failure, Invalid, Nothing, Some, Success, UnwrapError, Valid
from strategies import error_symbols, results


class TestConstruction:
    """Tests for building Results."""

    def test_success_holds_value(self):
        assert Success(42).value == 42

    def test_success_may_hold_none(self):
        """Success has no restriction on its payload."""
        assert Success(None).value is None

    def test_failure_holds_any_error(self):
        """Failure payloads can be symbols, exceptions or structured data."""
        err = ValueError('boom')
        assert Failure('not_found').error == 'not_found'
        assert Failure(err).error is err
        assert Failure({'code': 404}).error == {'code': 404}

    def test_equality(self):
        assert Success(1) == Success(1)
        assert Success(1) != Failure(1)
        assert Failure('x') == Failure('x')

    def test_frozen(self):
        with pytest.raises(AttributeError):
            Success(1).value = 2  # type: ignore[misc]


class TestPredicates:
    """Tests for is_success / is_failure."""

    def test_success(self):
        assert Success(1).is_success()
        assert not Success(1).is_failure()

    def test_failure(self):
        assert Failure('x').is_failure()
        assert not Failure('x').is_success()


class TestMapping:
    """Tests for map and map_failure."""

    def test_map_success(self):
        assert Success(2).map(lambda x: x * 10) == Success(20)

    def test_map_failure_passthrough(self):
        """map on Failure returns it without calling the function."""
        calls = []
        assert Failure('e').map(calls.append) == Failure('e')
        assert calls == []

    def test_map_failure(self):
        assert Failure('e').map_failure(str.upper) == Failure('E')
        assert Success(1).map_failure(str.upper) == Success(1)

    @given(results)
    def test_map_identity(self, r):
        assert r.map(lambda x: x) == r


class TestBind:
    """Tests for bind."""

    def test_bind_success(self):
        assert Success(3).bind(lambda x: Success(x + 1)) == Success(4)
        assert Success(3).bind(lambda _: Failure('no')) == Failure('no')

    def test_bind_failure_short_circuits(self):
        calls = []

        def step(x):
            calls.append(x)
            return Success(x)

        assert Failure('e').bind(step) == Failure('e')
        assert calls == []

    @given(results)
    def test_right_identity(self, r):
        assert r.bind(Success) == r

    @given(st.integers())
    def test_left_identity(self, x):
        def f(n):
            return Success(n * 2) if n >= 0 else Failure('negative')

        assert Success(x).bind(f) == f(x)


class TestFold:
    """Tests for fold."""

    def test_fold_success(self):
        assert Success(2).fold(lambda e: f'error {e}', lambda v: f'value {v}') == 'value 2'

    def test_fold_failure(self):
        assert Failure('x').fold(lambda e: f'error {e}', lambda v: f'value {v}') == 'error x'


class TestRecovery:
    """Tests for or_else, flip, flatten, value_or and unwrap."""

    def test_or_else(self):
        assert Success(1).or_else(lambda e: Success(0)) == Success(1)
        assert Failure('e').or_else(lambda e: Success(len(e))) == Success(1)

    def test_flip(self):
        assert Success(1).flip() == Failure(1)
        assert Failure('e').flip() == Success('e')

    def test_flatten(self):
        assert Success(Success(1)).flatten() == Success(1)
        assert Success(Failure('e')).flatten() == Failure('e')
        assert Failure('e').flatten() == Failure('e')

    @given(st.integers(), error_symbols)
    def test_value_or(self, x, error):
        assert Success(x).value_or(-1) == x
        assert Failure(error).value_or(-1) == -1

    def test_unwrap(self):
        assert Success('v').unwrap() == 'v'
        with pytest.raises(UnwrapError):
            Failure('e').unwrap()


class TestConversion:
    """Tests for to_maybe and to_validated."""

    def test_to_maybe(self):
        assert Success(1).to_maybe() == Some(1)
        assert Success(None).to_maybe() is Nothing
        assert Failure('e').to_maybe() is Nothing

    def test_to_validated(self):
        assert Success(1).to_validated() == Valid(1)
        assert Failure('e').to_validated() == Invalid('e')
