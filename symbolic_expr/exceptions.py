from __future__ import annotations

class SymbolicExprException(Exception):
    "Base exception for errors raised by symbolic expressions."
    pass

class SymbolicExprInternalException(SymbolicExprException):
    "Base exception for internal conditions in the library."
    pass

class ConstructionError(SymbolicExprInternalException):
    "A problem was encountered creating an object."
    pass

class MalformedRationalExpression(ConstructionError):
    "A rational expression was given an empty denominator."
    pass

class EvaluationError(SymbolicExprInternalException):
    "A problem was encountered while evaluating an expression."
    pass

class UnknownVariable(EvaluationError):
    "A variable in the expression has no value in the bindings."
    def __init__(self, name: str) -> None:
        super().__init__(f'unknown variable "{name}"')
        self.name = name

class NonIntegerResult(EvaluationError):
    "Evaluation did not produce a non-negative integer."
    pass
