import pytest

from symbolic_expr.calculate import (equivalent, is_equal, is_unequal, lift, lower,
                                     partial_substitute, partial_substitute_with,
                                     partial_substitution, substitute, substitute_with,
                                     substitution, variables)
from symbolic_expr.exceptions import UnknownVariable
from symbolic_expr.expr import Rational, variable
from symbolic_expr.rational import RationalExpression
from symbolic_expr.terms import CanonicalTerm

a, b = variable('a'), variable('b')
e = (a + 1 - 2) * 3 / (b + 1)


def test_substitute():
    assert substitute(e, {'a': 8, 'b': 6}) == 3
    assert substitute('a', {'a': 5}) == 5
    assert substitute(7, {}) == 7
    with pytest.raises(UnknownVariable):
        substitute(e, {'a': 8})

def test_substitution_with_keywords():
    assert substitution(e, a=8, b=6) == 3
    assert substitution(a * b, a=2, b=3) == 6

def test_substitute_with():
    at_a = substitute_with({'a': 8})
    assert at_a(e, b=6) == 3
    assert at_a(a + 2) == 10

    # keywords override the mapping
    wrong_a = substitute_with({'a': 1, 'b': 6})
    assert wrong_a(e, a=8) == 3

def test_partial_substitutions():
    expected = 21 / (b + 1)
    assert partial_substitute(e, {'a': 8}) == expected
    assert partial_substitution(e, a=8) == expected
    assert partial_substitute_with({'a': 8})(e) == expected
    assert partial_substitute_with({'a': 1})(e, a=8) == expected
    assert partial_substitute(a / b, {'b': 0}) is None

def test_variables():
    assert variables('a') == {'a'}
    assert variables(3) == set()
    assert variables(e) == {'a', 'b'}

def test_equivalence():
    assert equivalent('a', 'a') is True
    assert equivalent(a + b, b + a) is True
    assert equivalent(1, 2) is False
    assert equivalent('a', 'b') is None

    assert is_equal(a * (b + 1), a * b + a)
    assert not is_equal(a, b)
    assert is_unequal(a + 1, a)
    assert not is_unequal(a, b)

def test_lower_and_lift():
    r = lower(e)
    assert r == RationalExpression([CanonicalTerm.constant(-3), CanonicalTerm.with_var(3, 'a')],
                                   [CanonicalTerm.constant(1), CanonicalTerm.with_var(1, 'b')])
    assert lower(a / 0) is None
    assert lower('b') == RationalExpression([CanonicalTerm.with_var(1, 'b')], [CanonicalTerm.constant(1)])

    lifted = lift(r)
    assert isinstance(lifted, Rational)
    assert lifted == e
