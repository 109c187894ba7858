from __future__ import annotations

from collections.abc   import Mapping
from dataclasses       import dataclass
from fractions         import Fraction
from typing            import TYPE_CHECKING

from symbolic_expr.exceptions import MalformedRationalExpression, UnknownVariable
from symbolic_expr.logs       import get_logger
from symbolic_expr.numeric    import RATIONAL_ZERO, as_binding, power_of
from symbolic_expr.output     import in_panel
from symbolic_expr.terms      import (CanonicalTerm, Factor, TermList,
                                      combine_like_terms, multiply_terms,
                                      show_terms, sum_terms, terms_divide_by_term)

if TYPE_CHECKING:
    from symbolic_expr.expr import Expr

logger = get_logger(__name__)


#
# Ratios of Sums of Monomial Terms
#

@dataclass(frozen=True, init=False)
class RationalExpression:
    """A rational function (sum of numer terms) / (sum of denom terms).

    The denominator is never empty. Two rational expressions compare
    equal when their term tuples are identical; that implies they are
    the same function, but the same function can have several forms.

    """
    numer: tuple[CanonicalTerm, ...]
    denom: tuple[CanonicalTerm, ...]

    def __init__(self, numer: TermList, denom: TermList) -> None:
        if len(denom) == 0:
            raise MalformedRationalExpression('Denominator cannot be empty in RationalExpression')
        object.__setattr__(self, 'numer', tuple(numer))
        object.__setattr__(self, 'denom', tuple(denom))

    @classmethod
    def zero(cls) -> RationalExpression:
        return cls([CanonicalTerm.constant(0)], [CanonicalTerm.constant(1)])

    @classmethod
    def one(cls) -> RationalExpression:
        return cls([CanonicalTerm.constant(1)], [CanonicalTerm.constant(1)])

    def negated(self) -> RationalExpression:
        return RationalExpression([term.negated() for term in self.numer], self.denom)

    def inverted(self) -> RationalExpression:
        "Swaps numerator and denominator; a zero numerator raises ZeroDivisionError."
        if len(self.numer) == 0:
            raise ZeroDivisionError('cannot invert a rational expression with an empty numerator')
        return RationalExpression(self.denom, self.numer)

    def simplify(self) -> RationalExpression:
        """Returns the normalized form of this expression.

        A single-term denominator is divided into each numerator term,
        leaving a denominator of 1; an empty result is 0/1. Multi-term
        denominators are only normalized, no common factor is cancelled.

        """
        if len(self.denom) == 1:
            numer = terms_divide_by_term(self.numer, self.denom[0])
            if not numer:
                return RationalExpression.zero()
            return RationalExpression(numer, [CanonicalTerm.constant(1)])
        return RationalExpression(combine_like_terms(self.numer), combine_like_terms(self.denom))

    def is_zero(self) -> bool:
        return all(term.coef == 0 for term in self.numer)

    def variables(self) -> set[str]:
        return {factor.base for term in (*self.numer, *self.denom) for factor in term.factors}

    @property
    def sort_key(self):
        return (tuple(t.sort_key for t in self.numer), tuple(t.sort_key for t in self.denom))

    def __lt__(self, other):
        if isinstance(other, RationalExpression):
            return self.sort_key < other.sort_key
        return NotImplemented

    def __str__(self) -> str:
        if self.denom == (CanonicalTerm.constant(1),):
            return show_terms(self.numer)
        return f'({show_terms(self.numer)})/({show_terms(self.denom)})'

    def __rich__(self):
        return in_panel(str(self))

    #
    # Arithmetic
    #

    def __add__(self, other):
        if not isinstance(other, RationalExpression):
            return NotImplemented
        numer = sum_terms(multiply_terms(self.numer, other.denom),
                          multiply_terms(other.numer, self.denom))
        denom = multiply_terms(self.denom, other.denom)
        return RationalExpression(numer, denom)

    def __sub__(self, other):
        if not isinstance(other, RationalExpression):
            return NotImplemented
        return self + other.negated()

    def __mul__(self, other):
        if not isinstance(other, RationalExpression):
            return NotImplemented
        if len(other.denom) > 1:
            return RationalExpression(multiply_terms(self.numer, other.numer),
                                      multiply_terms(self.denom, other.denom))
        # A monomial denominator is divided straight into the numerator
        numer = terms_divide_by_term(multiply_terms(self.numer, other.numer), other.denom[0])
        return RationalExpression(numer, self.denom)

    def __truediv__(self, other):
        if not isinstance(other, RationalExpression):
            return NotImplemented
        return self * other.inverted()

    #
    # Lowering
    #

    @classmethod
    def from_expr(cls, expr: Expr) -> RationalExpression | None:
        """Converts an expression tree to canonical rational form.

        Returns None if the tree cannot be lowered, which happens when it
        divides by an expression that is identically zero.

        """
        try:
            return lower(expr)
        except ZeroDivisionError as e:
            logger.debug('Cannot lower %s: %s', expr, e)
            return None

    #
    # Substitution
    #

    def substitute(self, bindings: Mapping[str, int]) -> Fraction:
        """Evaluates with every variable bound, returning an exact rational.

        Raises UnknownVariable if a variable has no binding. A zero
        denominator raises ZeroDivisionError.

        """
        def substitute_term(term: CanonicalTerm) -> Fraction:
            value = term.coef
            for factor in term.factors:
                if factor.base not in bindings:
                    raise UnknownVariable(factor.base)
                value *= power_of(as_binding(factor.base, bindings[factor.base]), factor.exponent)
            return value

        numer = sum((substitute_term(term) for term in self.numer), RATIONAL_ZERO)
        denom = sum((substitute_term(term) for term in self.denom), RATIONAL_ZERO)
        return numer / denom

    def partial_substitute(self, bindings: Mapping[str, int]) -> RationalExpression | None:
        """Folds the bound variables into the coefficients, leaving the rest.

        Returns the simplified result, or None when a bound value cannot
        be divided out (a zero value under a negative exponent, or a
        denominator that becomes zero).

        """
        def substitute_term(term: CanonicalTerm) -> CanonicalTerm:
            coef = term.coef
            free: list[Factor] = []
            for factor in term.factors:
                if factor.base in bindings:
                    coef *= power_of(as_binding(factor.base, bindings[factor.base]), factor.exponent)
                else:
                    free.append(factor)
            return CanonicalTerm(coef, tuple(free))

        try:
            numer = combine_like_terms(substitute_term(term) for term in self.numer)
            denom = combine_like_terms(substitute_term(term) for term in self.denom)
            if not denom:
                raise ZeroDivisionError('denominator vanishes under substitution')
            return RationalExpression(numer, denom).simplify()
        except ZeroDivisionError as e:
            logger.debug('Cannot partially substitute %s into %s: %s', dict(bindings), self, e)
            return None


def lower(expr: Expr) -> RationalExpression:
    """Lowers an expression tree bottom up; raises ZeroDivisionError on division by zero.

    Sums fold by signed cross-multiplication, products by multiplying
    numerators and denominators (inverting negative operands first).

    """
    from symbolic_expr.expr import Constant, Product, Rational, Sum, Variable

    if isinstance(expr, Constant):
        return RationalExpression([CanonicalTerm.constant(expr.value)], [CanonicalTerm.constant(1)])

    if isinstance(expr, Variable):
        return RationalExpression([CanonicalTerm.with_var(1, expr.name)], [CanonicalTerm.constant(1)])

    if isinstance(expr, Sum):
        result = RationalExpression.zero()
        for operand in expr.operands:
            rational = lower(operand.expr)
            result = result + rational if operand.is_positive() else result - rational
        return result

    if isinstance(expr, Product):
        result = RationalExpression.one()
        for operand in expr.operands:
            rational = lower(operand.expr)
            result = result * rational if operand.is_positive() else result / rational
        return result

    assert isinstance(expr, Rational), f'Unknown expression variant {type(expr).__name__}'
    return expr.rational
