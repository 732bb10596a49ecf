"""
Batch evaluation of a shape's formula map.

Formulas are independent: none may reference another's result, and a
failing formula drops out of the output without affecting the rest.
"""

import logging
from typing import Optional

from ..errors import FormulaError
from ..schemas import EvaluationResult, FormulaDefinition
from .formula_evaluator import evaluate

logger = logging.getLogger(__name__)


def evaluate_all_detailed(
    formulas: dict,
    context: dict,
    density: Optional[float] = None,
) -> tuple[dict[str, EvaluationResult], dict[str, str]]:
    """
    Evaluate every plain formula in the map.
    Returns (results, errors), where errors maps each failing key to its message.
    Composite entries (blank dimensions, custom formula sets) are skipped.
    """
    results = {}
    errors = {}
    for name, formula in formulas.items():
        if not isinstance(formula, FormulaDefinition):
            continue
        try:
            results[name] = evaluate(formula, context, density)
        except FormulaError as e:
            logger.error(f"Error evaluating formula {name}: {e}")
            errors[name] = str(e)
    return results, errors


def evaluate_all(
    formulas: dict,
    context: dict,
    density: Optional[float] = None,
) -> dict[str, EvaluationResult]:
    """Evaluate every formula; failures are logged and their keys omitted."""
    results, _ = evaluate_all_detailed(formulas, context, density)
    return results
