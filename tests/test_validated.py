"""Tests for Validated (Valid and Invalid)."""

import pytest
from hypothesis import given
from monadkit import Failure, Invalid, Success, UnwrapError, Valid
from strategies import validateds


class TestValidated:
    """Tests for the Validated operations."""

    def test_predicates(self):
        assert Valid(1).is_valid()
        assert not Valid(1).is_invalid()
        assert Invalid('e').is_invalid()
        assert not Invalid('e').is_valid()

    def test_map(self):
        assert Valid(2).map(lambda x: x * 2) == Valid(4)
        assert Invalid('e').map(lambda x: x * 2) == Invalid('e')

    def test_map_invalid(self):
        assert Invalid('e').map_invalid(str.upper) == Invalid('E')
        assert Valid(1).map_invalid(str.upper) == Valid(1)

    def test_bind(self):
        assert Valid(2).bind(lambda x: Valid(x + 1)) == Valid(3)
        assert Valid(2).bind(lambda _: Invalid('no')) == Invalid('no')
        assert Invalid('e').bind(lambda x: Valid(x)) == Invalid('e')

    def test_fold(self):
        assert Valid(1).fold(lambda e: 'bad', lambda v: 'ok') == 'ok'
        assert Invalid('e').fold(lambda e: f'bad {e}', lambda v: 'ok') == 'bad e'

    def test_value_or_and_unwrap(self):
        assert Valid(1).value_or(0) == 1
        assert Invalid('e').value_or(0) == 0
        assert Valid(1).unwrap() == 1
        with pytest.raises(UnwrapError):
            Invalid('e').unwrap()

    def test_to_result(self):
        assert Valid(1).to_result() == Success(1)
        assert Invalid('e').to_result() == Failure('e')

    @given(validateds)
    def test_map_identity(self, v):
        assert v.map(lambda x: x) == v


class TestApply:
    """Tests for applicative error accumulation."""

    def test_valid_applies_function(self):
        assert Valid(lambda x: x + 1).apply(Valid(1)) == Valid(2)

    def test_valid_function_with_invalid_argument(self):
        assert Valid(lambda x: x + 1).apply(Invalid('bad')) == Invalid('bad')

    def test_invalid_ignores_valid_argument(self):
        assert Invalid('bad').apply(Valid(1)) == Invalid('bad')

    def test_errors_accumulate(self):
        """Two Invalids concatenate their errors."""
        assert Invalid('a').apply(Invalid('b')) == Invalid(['a', 'b'])
        assert Invalid(['a', 'b']).apply(Invalid('c')) == Invalid(['a', 'b', 'c'])
        assert Invalid('a').apply(Invalid(['b', 'c'])) == Invalid(['a', 'b', 'c'])

    def test_curried_validation(self):
        """Every failing field is reported, not only the first."""

        def check_name(name):
            return Valid(name) if name else Invalid('name is empty')

        def check_age(age):
            return Valid(age) if age >= 0 else Invalid('age is negative')

        def make_user(name):
            return lambda age: {'name': name, 'age': age}

        ok = Valid(make_user).apply(check_name('ada')).apply(check_age(36))
        assert ok == Valid({'name': 'ada', 'age': 36})

        bad = Valid(make_user).apply(check_name('')).apply(check_age(-1))
        assert bad == Invalid(['name is empty', 'age is negative'])
