from __future__ import annotations

from abc               import ABC
from collections.abc   import Mapping
from dataclasses       import dataclass
from enum              import Enum, auto
from typing            import Union

from symbolic_expr.exceptions import ConstructionError, NonIntegerResult, UnknownVariable
from symbolic_expr.logs       import get_logger
from symbolic_expr.numeric    import as_binding, as_natural, is_natural
from symbolic_expr.output     import in_panel
from symbolic_expr.rational   import RationalExpression

logger = get_logger(__name__)


#
# Operand Signs
#

class Sign(Enum):
    "Whether an operand adds (multiplies) or subtracts (divides) in its Sum (Product)."
    POSITIVE = auto()
    NEGATIVE = auto()

    def reversed(self) -> Sign:
        return Sign.NEGATIVE if self is Sign.POSITIVE else Sign.POSITIVE


@dataclass(frozen=True, eq=False)
class Operand:
    "A sign-tagged expression inside a Sum or Product."
    sign: Sign
    expr: Expr

    def is_positive(self) -> bool:
        return self.sign is Sign.POSITIVE

    def reversed(self) -> Operand:
        return Operand(self.sign.reversed(), self.expr)

    def __neg__(self) -> Operand:
        return self.reversed()


#
# Expression Trees
#

class Expr(ABC):
    """A dimension expression: Constant, Variable, Sum, Product, or Rational.

    These five variants are the whole family; every traversal below
    handles each of them. Trees are immutable, and the arithmetic
    operators build new trees, flattening a Sum into a Sum and a
    Product into a Product.

    Equality is three valued. `a.equivalent(b)` is True when a and b
    are equal for every assignment of the variables, False when they
    differ for every assignment, and None when that depends on the
    assignment (or cannot be decided from the canonical form). Then
    `a == b` means equivalent is True and `a != b` means equivalent is
    False, so *both* can be false at once; `not (a == b)` does not
    imply `a != b`. Expressions are unhashable for the same reason.
    Both operators accept whatever `equivalent` accepts: expressions,
    integers, variable names, and rational expressions.

    """
    __hash__ = None  # type: ignore

    def positive(self) -> Operand:
        return Operand(Sign.POSITIVE, self)

    def negative(self) -> Operand:
        return Operand(Sign.NEGATIVE, self)

    @classmethod
    def from_rational(cls, rational: RationalExpression) -> Rational:
        "Lifts a rational expression into a tree, simplifying it first."
        return Rational(rational.simplify())

    def to_rational(self) -> RationalExpression | None:
        return RationalExpression.from_expr(self)

    def variables(self) -> set[str]:
        "Returns the names of the variables appearing in this expression."
        return collect_variables(self, set())

    def substitute(self, bindings: Mapping[str, int]) -> int:
        """Evaluates this expression with every variable bound to a non-negative integer.

        Raises UnknownVariable if some variable is not bound and
        NonIntegerResult if a subtraction goes below zero, a division is
        not exact, or a rational part does not evaluate to an integer.

        """
        return evaluate(self, bindings)

    def partial_substitute(self, bindings: Mapping[str, int]) -> Expr | None:
        """Substitutes the bound variables, leaving the others symbolic.

        Returns a simplified Rational expression, or None if the
        substitution cannot be carried out (e.g., it divides by zero).

        """
        rational = RationalExpression.from_expr(self)
        if rational is None:
            return None
        substituted = rational.partial_substitute(bindings)
        if substituted is None:
            return None
        return Expr.from_rational(substituted)

    def equivalent(self, other: Expr | int | str) -> bool | None:
        """Decides whether two expressions are equal for all variable values.

        Returns True if the difference is identically zero, False if it
        is a nonzero constant, and None if it still depends on variables.
        A True answer is always correct; None may hide equalities that
        would need factoring to see.

        """
        diff = RationalExpression.from_expr(self - as_expr(other))
        if diff is None:
            return None

        nonzero = [term for term in diff.simplify().numer if term.coef != 0]
        if not nonzero:
            answer = True
        elif len(nonzero) == 1 and nonzero[0].is_constant():
            answer = False
        else:
            answer = None
        logger.debug('%s vs %s: difference %s, equivalent %s', self, other, diff, answer)
        return answer

    def __eq__(self, other):
        if not is_comparable(other):
            return NotImplemented
        return self.equivalent(other) is True

    def __ne__(self, other):
        if not is_comparable(other):
            return NotImplemented
        return self.equivalent(other) is False

    def __add__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Sum, self, other, Sign.POSITIVE)

    def __radd__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Sum, other, self, Sign.POSITIVE)

    def __sub__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Sum, self, other, Sign.NEGATIVE)

    def __rsub__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Sum, other, self, Sign.NEGATIVE)

    def __mul__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Product, self, other, Sign.POSITIVE)

    def __rmul__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Product, other, self, Sign.POSITIVE)

    def __truediv__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Product, self, other, Sign.NEGATIVE)

    def __rtruediv__(self, other):
        other = coerce(other)
        if other is None:
            return NotImplemented
        return join(Product, other, self, Sign.NEGATIVE)

    def __str__(self) -> str:
        return show_expr(self)

    def __rich__(self):
        return in_panel(str(self))


@dataclass(frozen=True, eq=False)
class Constant(Expr):
    value: int = 0

    def __post_init__(self) -> None:
        if not is_natural(self.value):
            raise ConstructionError(f'A constant must be a non-negative integer, got {self.value!r}.')


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ConstructionError('A symbolic variable name must be a non-empty string.')


@dataclass(frozen=True, eq=False)
class Sum(Expr):
    operands: tuple[Operand, ...]


@dataclass(frozen=True, eq=False)
class Product(Expr):
    operands: tuple[Operand, ...]


@dataclass(frozen=True, eq=False)
class Rational(Expr):
    "An expression already in canonical rational form."
    rational: RationalExpression


#
# Tree Construction
#

def join(kind: type[Sum] | type[Product], left: Expr, right: Expr, sign: Sign) -> Expr:
    """Combines two expressions as `left + right` (or -, *, /) into a flat Sum or Product.

    An operand that is already of the given kind contributes its own
    operands; those of the right side have their signs flipped when the
    sign is negative.

    """
    def right_operands():
        if isinstance(right, kind):
            return [op if sign is Sign.POSITIVE else op.reversed() for op in right.operands]
        return [Operand(sign, right)]

    if isinstance(left, kind):
        return kind((*left.operands, *right_operands()))
    return kind((left.positive(), *right_operands()))

def coerce(x) -> Expr | None:
    "Converts operator arguments to expressions; None if unsupported."
    if isinstance(x, Expr):
        return x
    if isinstance(x, int) and not isinstance(x, bool):
        return Constant(x)
    return None

def is_comparable(x) -> bool:
    "Can x be compared with an expression? These are the types `as_expr` accepts."
    return isinstance(x, (Expr, RationalExpression, str)) or (isinstance(x, int) and not isinstance(x, bool))

def as_expr(x: Union[Expr, RationalExpression, int, str]) -> Expr:
    "Converts a non-negative integer, variable name, or rational expression into an expression."
    if isinstance(x, Expr):
        return x
    if isinstance(x, RationalExpression):
        return Expr.from_rational(x)
    if isinstance(x, str):
        return Variable(x)
    if isinstance(x, int) and not isinstance(x, bool):
        return Constant(x)
    raise ConstructionError(f'Cannot convert {x!r} to a symbolic expression.')

def constant(value: int) -> Constant:
    "Returns a constant expression with the given non-negative value."
    return Constant(value)

def variable(name: str) -> Variable:
    "Returns a variable with the given name, typically a single letter."
    return Variable(name)


#
# Traversals
#

def collect_variables(expr: Expr, names: set[str]) -> set[str]:
    if isinstance(expr, Constant):
        pass
    elif isinstance(expr, Variable):
        names.add(expr.name)
    elif isinstance(expr, (Sum, Product)):
        for operand in expr.operands:
            collect_variables(operand.expr, names)
    else:
        assert isinstance(expr, Rational), f'Unknown expression variant {type(expr).__name__}'
        names |= expr.rational.variables()
    return names

def evaluate(expr: Expr, bindings: Mapping[str, int]) -> int:
    if isinstance(expr, Constant):
        return expr.value

    if isinstance(expr, Variable):
        if expr.name not in bindings:
            raise UnknownVariable(expr.name)
        return as_binding(expr.name, bindings[expr.name])

    if isinstance(expr, Sum):
        total = 0
        for operand in expr.operands:
            value = evaluate(operand.expr, bindings)
            if operand.is_positive():
                total += value
            elif value > total:
                raise NonIntegerResult(f'{total} - {value} is negative in {expr}')
            else:
                total -= value
        return total

    if isinstance(expr, Product):
        total = 1
        for operand in expr.operands:
            value = evaluate(operand.expr, bindings)
            if operand.is_positive():
                total *= value
            elif value == 0 or total % value != 0:
                raise NonIntegerResult(f'{total} / {value} is not exact in {expr}')
            else:
                total //= value
        return total

    assert isinstance(expr, Rational), f'Unknown expression variant {type(expr).__name__}'
    try:
        value = expr.rational.substitute(bindings)
    except ZeroDivisionError as e:
        raise NonIntegerResult(f'{expr} divides by zero') from e
    return as_natural(value)


#
# Display
#

def is_compound_sum(expr: Expr) -> bool:
    if isinstance(expr, Sum):
        return len(expr.operands) > 1 or any(not op.is_positive() for op in expr.operands)
    if isinstance(expr, Rational):
        return len(expr.rational.numer) > 1 or len(expr.rational.denom) > 1
    return False

def show_operand(expr: Expr, parens: bool) -> str:
    shown = show_expr(expr)
    return f'({shown})' if parens else shown

def show_expr(expr: Expr) -> str:
    if isinstance(expr, Constant):
        return str(expr.value)

    if isinstance(expr, Variable):
        return expr.name

    if isinstance(expr, Sum):
        if not expr.operands:
            return '0'
        parts = []
        for index, operand in enumerate(expr.operands):
            parens = not operand.is_positive() and is_compound_sum(operand.expr)
            shown = show_operand(operand.expr, parens)
            if index == 0:
                parts.append(shown if operand.is_positive() else '-' + shown)
            else:
                parts.append(('+ ' if operand.is_positive() else '- ') + shown)
        return ' '.join(parts)

    if isinstance(expr, Product):
        if not expr.operands:
            return '1'
        parts = []
        for index, operand in enumerate(expr.operands):
            parens = (is_compound_sum(operand.expr) or
                      (not operand.is_positive() and isinstance(operand.expr, Product)))
            shown = show_operand(operand.expr, parens)
            if index == 0:
                parts.append(shown if operand.is_positive() else '1 / ' + shown)
            else:
                parts.append(('* ' if operand.is_positive() else '/ ') + shown)
        return ' '.join(parts)

    assert isinstance(expr, Rational), f'Unknown expression variant {type(expr).__name__}'
    return str(expr.rational)
