"""
Formula evaluator: one catalog formula against one parameter context.

Variables are checked before any arithmetic runs, so a missing parameter is
reported by name rather than surfacing as an evaluation failure. Expected
ranges are advisory: a value outside the range is logged and flagged on the
result, never rejected.
"""

import logging
import math
from typing import Optional

from ..errors import EvaluationError, MissingVariablesError
from ..schemas import EvaluationResult, FormulaDefinition
from .expression import FUNCTIONS, compile_expression, to_decimal

logger = logging.getLogger(__name__)

DENSITY_VARIABLE = "density"


def _required_names(formula: FormulaDefinition, symbols: tuple) -> list[str]:
    names = list(formula.variables)
    if formula.requires_density:
        names.append(DENSITY_VARIABLE)
    names.extend(symbols)
    seen = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen


def evaluate(formula: FormulaDefinition, context: dict, density: Optional[float] = None) -> EvaluationResult:
    """
    Evaluate a formula definition.

    context maps parameter names to numbers. An explicit density takes
    precedence over a "density" key in the context.

    Raises FormulaSyntaxError, MissingVariablesError or EvaluationError.
    """
    compiled = compile_expression(formula.expression)

    values = dict(context)
    if density is not None:
        values[DENSITY_VARIABLE] = density

    required = _required_names(formula, compiled.symbols)
    missing = [name for name in required if values.get(name) is None]
    if missing:
        raise MissingVariablesError(missing, formula.expression)

    resolved = {name: to_decimal(name, values[name]) for name in required}
    raw = compiled.evaluate(resolved)

    result = float(raw)
    if not math.isfinite(result):
        raise EvaluationError(
            f"Result of {formula.expression!r} is out of floating point range",
            formula.expression,
        )

    range_warning = None
    expected = formula.expected_range
    if expected is not None and not (expected.min <= result <= expected.max):
        range_warning = (
            f"Result {result} {formula.unit} outside expected range "
            f"[{expected.min}, {expected.max}]"
        )
        if expected.warning:
            range_warning = f"{range_warning}: {expected.warning}"
        logger.warning(range_warning)

    return EvaluationResult(
        result=result,
        unit=formula.unit,
        expression=formula.expression,
        variables={name: float(value) for name, value in resolved.items()},
        range_warning=range_warning,
    )


def validate_syntax(expression: str) -> bool:
    """Returns True for a well-formed expression; raises FormulaSyntaxError otherwise."""
    compile_expression(expression)
    return True


def extract_variables(expression: str) -> list[str]:
    """Free symbols in first-seen order, excluding pi/e constants and function names."""
    return list(compile_expression(expression).symbols)


def check_formula(formula: FormulaDefinition) -> list[str]:
    """
    Authoring check: compares the symbols an expression actually uses with
    its declared variables. Returns a list of human-readable problems.
    """
    problems = []
    symbols = extract_variables(formula.expression)
    declared = list(formula.variables)

    for name in symbols:
        if name == DENSITY_VARIABLE:
            if not formula.requires_density and DENSITY_VARIABLE not in declared:
                problems.append(
                    f"{formula.expression!r} uses density but does not set requires_density"
                )
        elif name not in declared:
            problems.append(f"{formula.expression!r} uses undeclared variable {name!r}")

    for name in declared:
        if name not in symbols:
            problems.append(f"{formula.expression!r} declares unused variable {name!r}")
        if name in FUNCTIONS:
            problems.append(f"Declared variable {name!r} shadows a function name")

    if formula.requires_density and DENSITY_VARIABLE not in symbols:
        problems.append(f"{formula.expression!r} sets requires_density but never uses density")

    return problems
