from __future__ import annotations

import re

from collections       import defaultdict
from collections.abc   import Iterable
from dataclasses       import dataclass
from fractions         import Fraction
from typing            import Union

from symbolic_expr.exceptions import ConstructionError
from symbolic_expr.numeric    import RATIONAL_ZERO, ScalarQ, as_coef, is_zero, show_coef


#
# Factors
#

@dataclass(frozen=True, order=True)
class Factor:
    "A variable raised to an integer power; ordered by base, then exponent."
    base: str
    exponent: int = 1

    def __str__(self) -> str:
        return f'{self.base}^{self.exponent}'

def merge_factors(factors: Iterable[Factor]) -> tuple[Factor, ...]:
    "Merges factors with a common base, dropping zero powers, sorted by base."
    powers: dict[str, int] = defaultdict(int)
    for factor in factors:
        if not factor.base:
            raise ConstructionError('A symbolic variable name must be a non-empty string.')
        powers[factor.base] += factor.exponent
    return tuple(Factor(base, pow) for base, pow in sorted(powers.items()) if pow != 0)


#
# Monomial Terms
#

@dataclass(frozen=True)
class CanonicalTerm:
    """A monomial c a_1^k_1 a_2^k_2 ... a_n^k_n with exact coefficient c.

    Construction normalizes the factors, so each base appears at most
    once, no factor has exponent 0, and factors are sorted by base.
    Terms order by their factors and then by coefficient; constants
    (no factors) sort first.

    """
    coef: Fraction
    factors: tuple[Factor, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'coef', as_coef(self.coef))
        object.__setattr__(self, 'factors', merge_factors(self.factors))

    @classmethod
    def constant(cls, coef: ScalarQ) -> CanonicalTerm:
        return cls(as_coef(coef))

    @classmethod
    def with_var(cls, coef: ScalarQ, var: str) -> CanonicalTerm:
        return cls(as_coef(coef), (Factor(var, 1),))

    def is_constant(self) -> bool:
        return len(self.factors) == 0

    def negated(self) -> CanonicalTerm:
        return CanonicalTerm(-self.coef, self.factors)

    def multiply(self, other: CanonicalTerm) -> CanonicalTerm:
        return CanonicalTerm(self.coef * other.coef, self.factors + other.factors)

    def divide(self, other: CanonicalTerm) -> CanonicalTerm:
        "Multiplies by the reciprocal of `other`; a zero divisor raises ZeroDivisionError."
        reciprocal = tuple(Factor(f.base, -f.exponent) for f in other.factors)
        return CanonicalTerm(self.coef / other.coef, self.factors + reciprocal)

    @property
    def signature(self) -> str:
        return " ".join(str(f) for f in self.factors) or '1'

    @property
    def sort_key(self):
        return (self.factors, self.coef)

    def __lt__(self, other):
        if isinstance(other, CanonicalTerm):
            return self.sort_key < other.sort_key
        return NotImplemented

    def __str__(self) -> str:
        if self.is_constant():
            return show_coef(self.coef)
        term = re.sub(r'\^1( |$)', lambda m: ' ' if m.group(1) else '', self.signature)
        if self.coef == 1:
            return term
        if self.coef == -1:
            return '-' + term
        return show_coef(self.coef) + ' ' + term

TermList = Union[list[CanonicalTerm], tuple[CanonicalTerm, ...]]


#
# Term List Algebra
#

def combine_like_terms(terms: Iterable[CanonicalTerm]) -> list[CanonicalTerm]:
    """Sums the coefficients of terms with identical factors.

    Returns a sorted list with at most one term per distinct monomial
    (so at most one constant, which comes first) and no zero terms.
    Applying this to its own output returns the same list.

    """
    combined: dict[tuple[Factor, ...], Fraction] = {}
    for term in terms:
        combined[term.factors] = combined.get(term.factors, RATIONAL_ZERO) + term.coef
    return sorted((CanonicalTerm(coef, factors)
                   for factors, coef in combined.items() if not is_zero(coef)),
                  key=lambda t: t.sort_key)

def sum_terms(terms: TermList, other: TermList) -> list[CanonicalTerm]:
    return combine_like_terms([*terms, *other])

def multiply_terms(terms: TermList, other: TermList) -> list[CanonicalTerm]:
    "Multiplies two sums of terms, every term against every term."
    return combine_like_terms(term1.multiply(term2) for term1 in terms for term2 in other)

def terms_divide_by_term(terms: TermList, divisor: CanonicalTerm) -> list[CanonicalTerm]:
    return combine_like_terms(term.divide(divisor) for term in terms)

def show_terms(terms: TermList) -> str:
    if not terms:
        return '0'
    shown = str(terms[0])
    for term in terms[1:]:
        if term.coef < 0:
            shown += ' - ' + str(term.negated())
        else:
            shown += ' + ' + str(term)
    return shown
