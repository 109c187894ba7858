# Exact rational quantities used for coefficients and evaluated values.
#
# Coefficients are always Fractions so that every operation on terms is
# exact; floats and Decimals are rejected rather than approximated.

from __future__  import annotations

from fractions         import Fraction
from typing            import Union
from typing_extensions import TypeAlias, TypeGuard

from symbolic_expr.exceptions import ConstructionError, EvaluationError, NonIntegerResult


ScalarQ: TypeAlias = Union[int, Fraction]

RATIONAL_ZERO = Fraction(0)


def is_natural(x) -> TypeGuard[int]:
    "Is x a non-negative integer (and not a bool)?"
    return isinstance(x, int) and not isinstance(x, bool) and x >= 0

def is_zero(x: ScalarQ) -> bool:
    return x == 0

def as_coef(x: ScalarQ) -> Fraction:
    "Converts an exact scalar to a Fraction coefficient."
    if isinstance(x, Fraction):
        return x
    if isinstance(x, int) and not isinstance(x, bool):
        return Fraction(x)
    raise ConstructionError(f'Coefficients must be integers or Fractions, got {x!r}.')

def as_binding(name: str, value) -> int:
    "Validates a value bound to a variable for substitution."
    if not is_natural(value):
        raise EvaluationError(f'Variable "{name}" must be bound to a non-negative integer, got {value!r}.')
    return value

def power_of(value: int, exponent: int) -> Fraction:
    """Returns value^exponent exactly, as a Fraction.

    Negative exponents divide; a zero value with a negative exponent
    raises ZeroDivisionError.

    """
    return Fraction(value) ** exponent

def as_natural(x: Fraction) -> int:
    "Converts an evaluated rational to the integer it must be, by magnitude."
    if x.denominator != 1:
        raise NonIntegerResult(f'rational expression must evaluate to a whole number, got {x}')
    return abs(x.numerator)

def show_coef(x: ScalarQ) -> str:
    return str(as_coef(x))
