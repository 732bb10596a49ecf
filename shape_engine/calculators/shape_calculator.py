"""
Shape calculation pipeline.

Given a shape definition, a material and the chosen parameter values, this
evaluates the shape's formulas and produces dimensions, weight, blank/scrap
figures and an itemized cost estimate.

Catalog formula keys are camelCase (volume, surfaceArea, blankArea, ...);
result fields are snake_case. Geometry is in mm, weight in kg, rates in
currency per metre or per m².
"""

import logging
import math
from typing import Optional, Union

from ..config import settings
from ..errors import FormulaError, ShapeCalculationError
from ..models import BlankType, ParameterDataType
from ..schemas import (
    BlankDefinition,
    BlankDimensions,
    CalculatedValues,
    CalculationFailure,
    CalculationRequest,
    CalculationResult,
    CostEstimate,
    CustomCalculation,
    CustomFormulaSet,
    FabricationCost,
    FabricationRates,
    FormulaDefinition,
    Material,
    ParameterEcho,
    ParameterValidation,
    ShapeDefinition,
)
from .batch import evaluate_all_detailed
from .fabrication_rates import resolve_fabrication_rates, thickness_multiplier
from .formula_evaluator import evaluate

logger = logging.getLogger(__name__)

# Shape-defined formulas that must succeed for a result to mean anything
REQUIRED_PRIMITIVES = ("volume", "weight")

# catalog key -> CalculatedValues field
OPTIONAL_PRIMITIVES = {
    "surfaceArea": "surface_area",
    "innerSurfaceArea": "inner_surface_area",
    "outerSurfaceArea": "outer_surface_area",
    "wettedArea": "wetted_area",
    "blankArea": "blank_area",
    "finishedArea": "finished_area",
    "scrapPercentage": "scrap_percentage",
    "edgeLength": "edge_length",
    "weldLength": "weld_length",
    "perimeter": "perimeter",
}

THICKNESS_PARAMETER = "t"


# --- Advisory validation rules ---
# Rule codes referenced by catalog entries. Each check returns True when the
# values pass; rules whose fields are not all present are skipped.

def _length_gt_width(v):
    return v["L"] >= v["W"]


def _d2_less_than_d1(v):
    return v["D2"] < v["D1"]


def _pad_extension(v):
    return v["padOD"] >= v["nozzleOD"] + 100


def _diameter_practical(v):
    return v["D"] <= 4000


def _thickness_practical(v):
    return v["t"] <= 150


def _scrap_reasonable(v):
    return v["scrapPct"] <= 50


RULE_CHECKS = {
    "SCRAP_REASONABLE": (("scrapPct",), _scrap_reasonable),
    "LENGTH_GT_WIDTH": (("L", "W"), _length_gt_width),
    "D2_LESS_THAN_D1": (("D1", "D2"), _d2_less_than_d1),
    "PAD_EXTENSION": (("padOD", "nozzleOD"), _pad_extension),
    "DIAMETER_PRACTICAL": (("D",), _diameter_practical),
    "THICKNESS_PRACTICAL": (("t",), _thickness_practical),
}


def _is_number(value) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, (int, float)) and math.isfinite(value)


def validate_parameter_values(shape: ShapeDefinition, values: dict) -> ParameterValidation:
    """
    Check parameter values against the shape's declarations: required
    parameters, min/max bounds, unknown names and advisory rules.
    """
    errors = []
    warnings = []

    for param in shape.parameters:
        value = values.get(param.name)
        if value is None:
            if param.required:
                errors.append(f"Required parameter '{param.label}' ({param.name}) is missing")
            continue
        if param.data_type == ParameterDataType.TEXT:
            continue
        if not _is_number(value):
            errors.append(f"Parameter '{param.label}' value {value!r} is not numeric")
            continue
        if param.min_value is not None and value < param.min_value:
            errors.append(
                f"Parameter '{param.label}' value {value} is below minimum {param.min_value}"
            )
        if param.max_value is not None and value > param.max_value:
            errors.append(
                f"Parameter '{param.label}' value {value} is above maximum {param.max_value}"
            )

    known = {param.name for param in shape.parameters}
    for name in values:
        if name not in known:
            warnings.append(f"Unknown parameter '{name}' provided")

    for rule in shape.validation_rules:
        if rule.rule not in RULE_CHECKS:
            logger.debug(f"No check registered for validation rule {rule.rule}")
            continue
        fields, check = RULE_CHECKS[rule.rule]
        if not all(_is_number(values.get(f)) for f in fields):
            continue
        if not check(values):
            if rule.severity == "error":
                errors.append(rule.error_message)
            else:
                warnings.append(rule.error_message)

    return ParameterValidation(is_valid=not errors, errors=errors, warnings=warnings)


def apply_parameter_defaults(shape: ShapeDefinition, values: dict) -> dict:
    """
    Fill omitted parameters from their default values and resolve SELECT
    options given by value ("SCH40") to their numeric value.
    """
    resolved = dict(values)
    for param in shape.parameters:
        value = resolved.get(param.name)
        if value is None:
            if param.default_value is not None:
                resolved[param.name] = param.default_value
            continue
        if param.data_type == ParameterDataType.SELECT and isinstance(value, str):
            for option in param.options:
                if option.value == value and option.numeric_value is not None:
                    resolved[param.name] = option.numeric_value
                    break
    return resolved


def _calculate_blank_dimensions(
    blank: BlankDefinition,
    context: dict,
    density: float,
    warnings: list,
    errors: list,
) -> BlankDimensions:
    dims = BlankDimensions(type=blank.blank_type, description=blank.description)

    def _run(key, formula):
        try:
            result = evaluate(formula, context, density)
        except FormulaError as e:
            logger.error(f"Error evaluating blank {key}: {e}")
            errors.append(f"blankDimensions.{key}: {e}")
            return None
        if result.range_warning:
            warnings.append(result.range_warning)
        return result.result

    if blank.blank_type == BlankType.RECTANGULAR and blank.blank_length and blank.blank_width:
        dims.length = _run("length", blank.blank_length)
        dims.width = _run("width", blank.blank_width)
        if dims.length is not None and dims.width is not None:
            dims.area = dims.length * dims.width
    elif blank.blank_type == BlankType.CIRCULAR and blank.blank_diameter:
        dims.diameter = _run("diameter", blank.blank_diameter)
        if dims.diameter is not None:
            dims.area = math.pi * (dims.diameter / 2) ** 2

    if blank.blank_thickness and context.get(blank.blank_thickness) is not None:
        dims.thickness = float(context[blank.blank_thickness])

    if blank.scrap_formula:
        dims.scrap_percentage = _run("scrap", blank.scrap_formula)

    return dims


def _calculate_custom_formulas(
    formula_set: CustomFormulaSet,
    context: dict,
    density: float,
    warnings: list,
    errors: list,
) -> list[CustomCalculation]:
    calculations = []
    for custom in sorted(formula_set.formulas, key=lambda f: f.order):
        try:
            result = evaluate(custom.formula, context, density)
        except FormulaError as e:
            logger.error(f"Error evaluating custom formula {custom.name}: {e}")
            errors.append(f"Custom formula '{custom.name}': {e}")
            continue
        if result.range_warning:
            warnings.append(result.range_warning)
        if custom.display_in_results:
            calculations.append(CustomCalculation(
                name=custom.name,
                value=result.result,
                unit=custom.unit or result.unit,
            ))
    return calculations


def calculate_shape(
    shape: ShapeDefinition,
    material: Material,
    parameter_values: dict,
    quantity: float = 1,
    rates: Optional[FabricationRates] = None,
    user_rates: Optional[FabricationCost] = None,
) -> CalculationResult:
    """
    Run the full calculation for one shape/material/parameter combination.

    rates, when given, are used as-is; otherwise they are resolved from
    user_rates, the shape's own rates and the category/material defaults.

    Raises ShapeCalculationError when quantity is not positive, a parameter
    value is not numeric, or the shape's volume or weight formula fails.
    Other formula failures are isolated into result.errors.
    """
    causes = []
    if not _is_number(quantity) or quantity <= 0:
        causes.append(f"Quantity must be a positive number, got {quantity!r}")
    for name, value in parameter_values.items():
        if not _is_number(value):
            causes.append(f"Parameter '{name}' value {value!r} is not numeric")
    if causes:
        raise ShapeCalculationError(shape.name, causes)

    density = material.density or settings.DEFAULT_DENSITY
    context = dict(parameter_values)

    plain = {
        key: entry for key, entry in shape.formulas.items()
        if isinstance(entry, FormulaDefinition)
    }
    results, failures = evaluate_all_detailed(plain, context, density)

    required_failures = [
        f"{key}: {failures[key]}" for key in REQUIRED_PRIMITIVES if key in failures
    ]
    if required_failures:
        raise ShapeCalculationError(shape.name, required_failures)

    warnings = [r.range_warning for r in results.values() if r.range_warning]
    errors = [f"{key}: {message}" for key, message in failures.items()]

    values = CalculatedValues(
        volume=results["volume"].result if "volume" in results else 0.0,
        weight=results["weight"].result if "weight" in results else 0.0,
    )
    for key, field in OPTIONAL_PRIMITIVES.items():
        if key in results:
            setattr(values, field, results[key].result)

    for key, entry in shape.formulas.items():
        if isinstance(entry, BlankDefinition) and values.blank_dimensions is None:
            dims = _calculate_blank_dimensions(entry, context, density, warnings, errors)
            values.blank_dimensions = dims
            if values.blank_area is None and dims.area is not None:
                values.blank_area = dims.area
            if values.scrap_percentage is None and dims.scrap_percentage is not None:
                values.scrap_percentage = dims.scrap_percentage
        elif isinstance(entry, CustomFormulaSet):
            calculations = _calculate_custom_formulas(entry, context, density, warnings, errors)
            values.custom_calculations = (values.custom_calculations or []) + calculations

    weight = values.weight
    t = context.get(THICKNESS_PARAMETER)
    t = float(t) if t is not None else None

    price = 0.0
    currency = settings.DEFAULT_CURRENCY
    if material.current_price is not None:
        price = material.current_price.amount
        currency = material.current_price.currency or settings.DEFAULT_CURRENCY

    # Material cost and scrap
    material_cost = weight * price
    material_cost_actual = material_cost
    scrap_recovery_value = 0.0
    if values.blank_area is not None and values.finished_area is not None and t is not None:
        scrap_weight = max(0.0, (values.blank_area - values.finished_area) * density * t / 1e6)
        values.scrap_weight = scrap_weight
        material_cost_actual = (weight + scrap_weight) * price
        scrap_recovery_value = scrap_weight * price * settings.SCRAP_RECOVERY_RATE

    # Fabrication
    if rates is None:
        rates = resolve_fabrication_rates(
            shape.fabrication_cost, shape.category, material.category, user_rates
        )

    cutting_cost = 0.0
    if values.perimeter is not None:
        cutting_cost = (values.perimeter / 1000) * rates.cutting_cost_per_meter

    edge_preparation_cost = 0.0
    if values.edge_length is not None:
        edge_preparation_cost = (values.edge_length / 1000) * rates.edge_preparation_cost_per_meter

    welding_cost = 0.0
    if values.weld_length is not None:
        welding_cost = (
            (values.weld_length / 1000) * rates.welding_cost_per_meter * thickness_multiplier(t)
        )

    surface_treatment_cost = 0.0
    if values.surface_area is not None:
        surface_treatment_cost = (values.surface_area / 1e6) * rates.surface_treatment_cost_per_sqm

    base_fabrication_cost = (
        rates.base_cost
        + weight * rates.cost_per_kg
        + rates.labor_hours * rates.labor_rate_per_hour
    )
    fabrication_cost = (
        base_fabrication_cost
        + cutting_cost
        + edge_preparation_cost
        + welding_cost
        + surface_treatment_cost
    )

    unit_total = material_cost_actual - scrap_recovery_value + fabrication_cost

    cost = CostEstimate(
        material_cost=material_cost,
        material_cost_actual=material_cost_actual,
        scrap_recovery_value=scrap_recovery_value,
        fabrication_cost=fabrication_cost,
        base_fabrication_cost=base_fabrication_cost,
        cutting_cost=cutting_cost,
        edge_preparation_cost=edge_preparation_cost,
        welding_cost=welding_cost,
        surface_treatment_cost=surface_treatment_cost,
        total_cost=unit_total,
        currency=currency,
        effective_cost_per_kg=unit_total / weight if weight > 0 else 0.0,
    )

    echo = []
    for name, value in parameter_values.items():
        param = shape.get_parameter(name)
        echo.append(ParameterEcho(name=name, value=float(value), unit=param.unit if param else ""))

    logger.info(
        f"Calculated {shape.name} in {material.name}: "
        f"{weight:.3f} kg, {unit_total:.2f} {currency} per unit x {quantity}"
    )

    return CalculationResult(
        shape_id=shape.id,
        shape_name=shape.name,
        material_id=material.id,
        material_name=material.name,
        material_density=density,
        parameter_values=echo,
        calculated_values=values,
        cost_estimate=cost,
        quantity=quantity,
        total_weight=weight * quantity,
        total_cost=unit_total * quantity,
        warnings=warnings,
        errors=errors,
    )


def calculate_shapes(
    requests: list[CalculationRequest],
) -> list[Union[CalculationResult, CalculationFailure]]:
    """Calculate a batch. A failing request yields a CalculationFailure in its slot."""
    outcomes = []
    for request in requests:
        try:
            outcomes.append(calculate_shape(
                request.shape,
                request.material,
                request.parameter_values,
                request.quantity,
                user_rates=request.user_rates,
            ))
        except ShapeCalculationError as e:
            logger.error(str(e))
            outcomes.append(CalculationFailure(
                shape_id=request.shape.id,
                shape_name=request.shape.name,
                material_id=request.material.id,
                quantity=request.quantity,
                errors=e.causes,
            ))
    return outcomes
