"""
Builders shared by the catalog modules.

Every catalog formula uses mm for lengths, mm² for areas, mm³ for volumes
and kg for weights. Density is kg/m³, so weight = volume × density / 1e9.
"""

from typing import Optional

from ..models import ParameterDataType
from ..schemas import ExpectedRange, FormulaDefinition, ParameterOption, ShapeParameter

MM3_PER_M3 = "1e9"


def param(
    name: str,
    label: str,
    order: int,
    unit: str = "mm",
    default: Optional[float] = None,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
    required: bool = True,
    description: Optional[str] = None,
    used_in: tuple = (),
) -> ShapeParameter:
    return ShapeParameter(
        name=name,
        label=label,
        order=order,
        unit=unit,
        default_value=default,
        min_value=min_value,
        max_value=max_value,
        required=required,
        description=description,
        used_in_formulas=list(used_in),
    )


def select_param(
    name: str,
    label: str,
    order: int,
    options: list,
    unit: str = "mm",
    default: Optional[float] = None,
    used_in: tuple = (),
) -> ShapeParameter:
    """A SELECT parameter; options are (value, label, numeric_value) tuples."""
    return ShapeParameter(
        name=name,
        label=label,
        order=order,
        unit=unit,
        data_type=ParameterDataType.SELECT,
        default_value=default,
        options=[ParameterOption(value=v, label=l, numeric_value=n) for v, l, n in options],
        used_in_formulas=list(used_in),
    )


def formula(
    expression: str,
    variables: list,
    unit: str,
    description: Optional[str] = None,
    expected_range: Optional[tuple] = None,
) -> FormulaDefinition:
    """expected_range is (min, max) or (min, max, warning)."""
    return FormulaDefinition(
        expression=expression,
        variables=variables,
        unit=unit,
        description=description,
        expected_range=_expected(expected_range) if expected_range else None,
    )


def weight_formula(
    volume_expression: str,
    variables: list,
    description: Optional[str] = None,
    expected_range: Optional[tuple] = None,
) -> FormulaDefinition:
    """Weight in kg from a volume expression in mm³."""
    return FormulaDefinition(
        expression=f"({volume_expression}) * density / {MM3_PER_M3}",
        variables=variables,
        unit="kg",
        description=description or "Weight",
        requires_density=True,
        expected_range=_expected(expected_range) if expected_range else None,
    )


def _expected(expected_range: tuple) -> ExpectedRange:
    low, high, *warning = expected_range
    return ExpectedRange(min=low, max=high, warning=warning[0] if warning else None)
