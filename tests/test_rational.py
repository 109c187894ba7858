from fractions import Fraction

import pytest

from symbolic_expr.exceptions import ConstructionError, MalformedRationalExpression, UnknownVariable
from symbolic_expr.expr import Expr, Rational, constant, variable
from symbolic_expr.numeric import RATIONAL_ZERO
from symbolic_expr.rational import RationalExpression
from symbolic_expr.terms import CanonicalTerm, Factor


def term(coef, **powers):
    return CanonicalTerm(coef, tuple(Factor(base, pow) for base, pow in powers.items()))

def const(n):
    return CanonicalTerm.constant(n)

def var(name, coef=1):
    return CanonicalTerm.with_var(coef, name)

a, b = variable('a'), variable('b')


def test_empty_denominator_is_rejected():
    with pytest.raises(MalformedRationalExpression, match='Denominator cannot be empty'):
        RationalExpression([const(5)], [])
    assert issubclass(MalformedRationalExpression, ConstructionError)

def test_zero_and_one():
    assert RationalExpression.zero() == RationalExpression([const(0)], [const(1)])
    assert RationalExpression.one() == RationalExpression([const(1)], [const(1)])
    assert RationalExpression.zero().is_zero()
    assert RationalExpression([], [const(3)]).is_zero()
    assert not RationalExpression.one().is_zero()

def test_negated_and_inverted():
    r = RationalExpression([var('a'), const(1)], [var('b')])
    assert r.negated() == RationalExpression([var('a', -1), const(-1)], [var('b')])
    assert r.inverted() == RationalExpression([var('b')], [var('a'), const(1)])
    with pytest.raises(ZeroDivisionError):
        RationalExpression([], [const(1)]).inverted()

def test_simplify_single_term_denominator():
    r = RationalExpression([var('a', 2), var('b', 3)], [const(6)])
    assert r.simplify() == RationalExpression([var('a', Fraction(1, 3)), var('b', Fraction(1, 2))],
                                              [const(1)])

    r = RationalExpression([term(1, a=2, b=1)], [term(1, c=2)])
    assert r.simplify() == RationalExpression([term(1, a=2, b=1, c=-2)], [const(1)])

def test_simplify_empty_numerator_is_zero():
    assert RationalExpression([], [const(5)]).simplify() == RationalExpression.zero()
    assert RationalExpression([var('a'), var('a', -1)], [var('b')]).simplify() == RationalExpression.zero()

def test_simplify_multi_term_denominator_only_normalizes():
    r = RationalExpression([var('a'), var('a')], [var('c'), const(2)])
    assert r.simplify() == RationalExpression([var('a', 2)], [const(2), var('c')])

    # No cancellation across multi-term denominators
    r = RationalExpression([var('a'), const(1)], [var('a'), const(1)])
    assert r.simplify() == RationalExpression([const(1), var('a')], [const(1), var('a')])

def test_addition_cross_multiplies():
    half = RationalExpression([const(1)], [const(2)])
    assert (half + half).simplify() == RationalExpression.one()
    assert (half - half).simplify() == RationalExpression.zero()

    r = RationalExpression([var('a')], [const(1)]) + RationalExpression([const(1)], [var('b')])
    assert r == RationalExpression([const(1), term(1, a=1, b=1)], [var('b')])

def test_multiplication_divides_by_monomial_denominators():
    r = RationalExpression([var('a')], [const(1)]) * RationalExpression([const(1)], [var('b')])
    assert r == RationalExpression([term(1, a=1, b=-1)], [const(1)])

    r = RationalExpression([var('a')], [const(1)]) / RationalExpression([var('b')], [const(1)])
    assert r == RationalExpression([term(1, a=1, b=-1)], [const(1)])

def test_multiplication_with_multi_term_denominators():
    r = RationalExpression([var('a')], [const(1)]) * RationalExpression([const(1)], [const(1), var('b')])
    assert r == RationalExpression([var('a')], [const(1), var('b')])

    r = RationalExpression([var('a')], [var('c')]) / RationalExpression([const(1), var('b')], [const(1)])
    assert r == RationalExpression([var('a')], [term(1, b=1, c=1), term(1, c=1)])

def test_arithmetic_rejects_other_types():
    with pytest.raises(TypeError):
        RationalExpression.one() + 1

def test_from_expr_leaves():
    assert RationalExpression.from_expr(constant(3)) == RationalExpression([const(3)], [const(1)])
    assert RationalExpression.from_expr(a) == RationalExpression([var('a')], [const(1)])

    r = RationalExpression([var('a'), const(2)], [var('c'), const(1)])
    assert RationalExpression.from_expr(Rational(r)) is r

def test_from_expr_sums_and_products():
    assert RationalExpression.from_expr(a + 1 - 2) == RationalExpression([const(-1), var('a')], [const(1)])
    assert RationalExpression.from_expr((a * 2 + b * 3) / 6) == \
        RationalExpression([var('a', Fraction(1, 3)), var('b', Fraction(1, 2))], [const(1)])
    assert RationalExpression.from_expr(a / (b + 1)) == \
        RationalExpression([var('a')], [const(1), var('b')])
    assert RationalExpression.from_expr(a * a / b) == RationalExpression([term(1, a=2, b=-1)], [const(1)])

def test_from_expr_division_by_zero_gives_none():
    assert RationalExpression.from_expr(a / 0) is None
    assert RationalExpression.from_expr(a / (b - b)) is None
    assert RationalExpression.from_expr((a + 1) / (b * 0)) is None

def test_substitute():
    r = RationalExpression([var('a', 2), var('b', 3)], [const(6)])
    assert r.substitute({'a': 6, 'b': 4}) == Fraction(4)

    r = RationalExpression([term(1, a=2, b=1)], [term(1, c=2)])
    assert r.substitute({'a': 4, 'b': 2, 'c': 2}) == Fraction(8)

    r = RationalExpression([term(1, a=1, b=-1)], [const(1)])
    assert r.substitute({'a': 6, 'b': 2}) == Fraction(3)

    r = RationalExpression([const(1)], [const(2)])
    assert r.substitute({}) == Fraction(1, 2)

def test_substitute_unknown_variable():
    r = RationalExpression([var('a'), var('b')], [const(1)])
    with pytest.raises(UnknownVariable) as info:
        r.substitute({'a': 1})
    assert info.value.name == 'b'

def test_partial_substitute():
    r = RationalExpression([var('a', 2), var('b', 3)], [const(6)])
    assert r.partial_substitute({'a': 6}) == \
        RationalExpression([const(12), var('b', 3)], [const(6)]).simplify()

    r = RationalExpression([term(1, a=2, b=1)], [term(1, c=2)])
    assert r.partial_substitute({'a': 4, 'c': 2}) == \
        RationalExpression([var('b', 16)], [const(4)]).simplify()

    r = RationalExpression([var('a'), var('b')], [var('c'), const(1)])
    assert r.partial_substitute({}) == r.simplify()
    assert r.partial_substitute({'a': 1, 'b': 2, 'c': 2}) == RationalExpression([const(1)], [const(1)])

def test_partial_substitute_that_divides_by_zero_gives_none():
    r = RationalExpression([term(1, a=1, b=-1)], [const(1)])
    assert r.partial_substitute({'b': 0}) is None

    r = RationalExpression([var('a')], [const(-2), var('c')])
    assert r.partial_substitute({'c': 2}) is None
    assert r.partial_substitute({'c': 3}) == RationalExpression([var('a')], [const(1)])

def test_variables():
    r = RationalExpression([var('a'), var('b')], [var('c'), const(1)])
    assert r.variables() == {'a', 'b', 'c'}
    assert RationalExpression.one().variables() == set()

def test_round_trip_through_expr():
    rationals = [
        RationalExpression([var('a', 2), var('b', 3)], [const(6)]),
        RationalExpression([term(1, a=2, b=1)], [term(1, c=2)]),
        RationalExpression([], [const(1)]),
        RationalExpression([const(-3)], [const(1)]),
    ]
    for r in rationals:
        lifted = Expr.from_rational(r)
        assert RationalExpression.from_expr(lifted).simplify() == r.simplify()
        # through a tree that has to be lowered again
        rebuilt = RationalExpression.from_expr(lifted * 1 + 0)
        assert rebuilt.simplify() == r.simplify()

def test_ordering():
    small = RationalExpression([const(1)], [const(1)])
    large = RationalExpression([var('a')], [const(1)])
    assert small < large
    assert sorted([large, small]) == [small, large]

def test_show():
    assert str(RationalExpression([var('a', 2), var('b', 3)], [const(6)])) == '(2 a + 3 b)/(6)'
    assert str(RationalExpression([const(1), var('a')], [const(1)])) == '1 + a'
    assert str(RationalExpression([], [const(1)])) == '0'

def test_substitute_empty_numerator_is_exact_zero():
    value = RationalExpression([], [const(2)]).substitute({})
    assert value == RATIONAL_ZERO
    assert isinstance(value, Fraction)
