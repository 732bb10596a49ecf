"""
Error types raised by the formula evaluator and the shape calculation pipeline.

FormulaError subclasses are per-formula failures: the batch evaluator
catches them and drops the failing key. ShapeCalculationError is the single
aggregate failure surfaced to callers of calculate_shape.
"""

from typing import Optional


class FormulaError(Exception):
    """Base class for anything that goes wrong evaluating one formula."""


class FormulaSyntaxError(FormulaError, ValueError):
    """Malformed expression, raised at parse / validate time."""

    def __init__(self, message: str, expression: str = "", position: Optional[int] = None):
        super().__init__(message)
        self.expression = expression
        self.position = position


class MissingVariablesError(FormulaError):
    """One or more required variables were not supplied in the context."""

    def __init__(self, missing: list, expression: str = ""):
        self.missing = list(missing)
        self.expression = expression
        super().__init__(f"Missing required variables: {', '.join(self.missing)}")


class EvaluationError(FormulaError):
    """Any other evaluator failure; the original cause is chained."""

    def __init__(self, message: str, expression: str = ""):
        super().__init__(message)
        self.expression = expression


class ShapeCalculationError(Exception):
    """A required primitive failed or the inputs are structurally unusable."""

    def __init__(self, shape_name: str, causes: list):
        self.shape_name = shape_name
        self.causes = list(causes)
        super().__init__(
            f"Shape calculation failed for {shape_name}: {'; '.join(self.causes)}"
        )
