from __future__ import annotations

from collections.abc   import Mapping

from symbolic_expr.expr     import Expr, as_expr
from symbolic_expr.rational import RationalExpression


#
# Expression based calculations
#

def substitute(quantity, mapping: Mapping[str, int]) -> int:
    "Evaluates `quantity` with values for its variables from `mapping`."
    return as_expr(quantity).substitute(mapping)

def substitute_with(mapping: Mapping[str, int]):
    """Returns a function that evaluates expressions with values from `mapping`.

    Keyword arguments to the returned function override `mapping`.
    See `substitute`.

    """
    def sub(quantity, **kw):
        return substitute(quantity, {**mapping, **kw})
    return sub

def substitution(quantity, **kw) -> int:
    """Evaluates `quantity`, with values for its variables from keywords.

    """
    return substitute(quantity, kw)

def partial_substitute(quantity, mapping: Mapping[str, int]) -> Expr | None:
    "Substitutes values for the variables of `quantity` that appear in `mapping`."
    return as_expr(quantity).partial_substitute(mapping)

def partial_substitute_with(mapping: Mapping[str, int]):
    """Returns a function that partially substitutes values from `mapping`.

    See `partial_substitute`.

    """
    def sub(quantity, **kw):
        return partial_substitute(quantity, {**mapping, **kw})
    return sub

def partial_substitution(quantity, **kw) -> Expr | None:
    return partial_substitute(quantity, kw)

def variables(quantity) -> set[str]:
    return as_expr(quantity).variables()

def equivalent(a, b) -> bool | None:
    "Are a and b equal for all values of their variables? None if this cannot be decided."
    return as_expr(a).equivalent(b)

def is_equal(a, b) -> bool:
    return equivalent(a, b) is True

def is_unequal(a, b) -> bool:
    return equivalent(a, b) is False

def lower(quantity) -> RationalExpression | None:
    "Converts an expression to canonical rational form."
    return RationalExpression.from_expr(as_expr(quantity))

def lift(rational: RationalExpression) -> Expr:
    "Converts a canonical rational form back into an expression."
    return Expr.from_rational(rational)
