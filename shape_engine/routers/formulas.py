from typing import Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..calculators.formula_evaluator import evaluate, extract_variables
from ..errors import FormulaError, FormulaSyntaxError
from ..schemas import EvaluationResult, FormulaDefinition

router = APIRouter(prefix="/formulas", tags=["formulas"])


class FormulaValidateRequest(BaseModel):
    expression: str


class FormulaEvaluateRequest(BaseModel):
    formula: FormulaDefinition
    context: Dict[str, float] = {}
    density: Optional[float] = None


@router.post("/validate")
def validate_formula(body: FormulaValidateRequest):
    """Syntax check for the formula editor. Always 200; validity is in the body."""
    try:
        variables = extract_variables(body.expression)
    except FormulaSyntaxError as e:
        return {"valid": False, "error": str(e), "position": e.position}
    return {"valid": True, "variables": variables}


@router.post("/evaluate", response_model=EvaluationResult, response_model_exclude_none=True)
def evaluate_formula(body: FormulaEvaluateRequest):
    try:
        return evaluate(body.formula, body.context, body.density)
    except FormulaError as e:
        raise HTTPException(status_code=422, detail=str(e))
