import logging
from typing import Dict, List, Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..calculators.registry import get_shape, get_shapes_by_category, list_shapes
from ..calculators.shape_calculator import (
    apply_parameter_defaults,
    calculate_shape,
    validate_parameter_values,
)
from ..catalog.materials import get_material
from ..errors import ShapeCalculationError
from ..schemas import CalculationResult, FabricationCost, Material, ShapeDefinition

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shapes", tags=["shapes"])


class ShapeCalculateRequest(BaseModel):
    material_id: Optional[str] = None
    material: Optional[Material] = None
    parameter_values: Dict[str, Union[float, str]] = {}
    quantity: float = 1
    fabrication_rates: Optional[FabricationCost] = None
    apply_defaults: bool = True


def _get_shape_or_404(shape_id: str) -> ShapeDefinition:
    try:
        return get_shape(shape_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Shape not found: {shape_id}")


@router.get("/", response_model=List[ShapeDefinition])
def list_catalog_shapes(group: Optional[str] = None):
    if group is None:
        return list_shapes()
    try:
        return get_shapes_by_category(group)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{shape_id}", response_model=ShapeDefinition)
def get_catalog_shape(shape_id: str):
    return _get_shape_or_404(shape_id)


@router.post("/{shape_id}/calculate", response_model=CalculationResult, response_model_exclude_none=True)
def calculate(shape_id: str, body: ShapeCalculateRequest):
    """
    Calculate one shape. The material comes from the default master data
    (material_id) or inline (material); inline wins when both are given.
    """
    shape = _get_shape_or_404(shape_id)

    material = body.material
    if material is None:
        if not body.material_id:
            raise HTTPException(status_code=422, detail="Either material_id or material is required")
        try:
            material = get_material(body.material_id)
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Material not found: {body.material_id}")

    values = dict(body.parameter_values)
    if body.apply_defaults:
        values = apply_parameter_defaults(shape, values)

    validation = validate_parameter_values(shape, values)
    if not validation.is_valid:
        raise HTTPException(status_code=422, detail={"errors": validation.errors})

    try:
        result = calculate_shape(
            shape, material, values, body.quantity, user_rates=body.fabrication_rates
        )
    except ShapeCalculationError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=422, detail=str(e))

    result.warnings = validation.warnings + result.warnings
    return result
