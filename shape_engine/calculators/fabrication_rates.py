"""
Fabrication rate resolution.

Each operation rate is taken from the first layer that defines it:
  1. user override (per-quote rates)
  2. shape-level rate from the catalog entry
  3. category-group default, scaled by the material's difficulty factor
  4. global default from settings

Rates are INR: cutting/edge prep/welding per metre, surface treatment per m².
"""

from typing import Optional

from ..config import settings
from ..models import MaterialCategory, ShapeCategory
from ..schemas import FabricationCost, FabricationRates
from .registry import group_for_category

# Per-metre / per-m² defaults by category group.
# Shells and heads carry longer seams and bevelled edges; heat exchanger
# plates are drilled, which is billed as cutting.
CATEGORY_RATE_DEFAULTS = {
    "plates": {
        "cutting_cost_per_meter": 50.0,
        "edge_preparation_cost_per_meter": 100.0,
        "welding_cost_per_meter": 500.0,
        "surface_treatment_cost_per_sqm": 50.0,
    },
    "tubes": {
        "cutting_cost_per_meter": 80.0,
        "edge_preparation_cost_per_meter": 120.0,
        "welding_cost_per_meter": 600.0,
        "surface_treatment_cost_per_sqm": 60.0,
    },
    "shells": {
        "cutting_cost_per_meter": 60.0,
        "edge_preparation_cost_per_meter": 150.0,
        "welding_cost_per_meter": 750.0,
        "surface_treatment_cost_per_sqm": 60.0,
    },
    "heads": {
        "cutting_cost_per_meter": 70.0,
        "edge_preparation_cost_per_meter": 150.0,
        "welding_cost_per_meter": 800.0,
        "surface_treatment_cost_per_sqm": 75.0,
    },
    "heat_exchanger": {
        "cutting_cost_per_meter": 90.0,
        "edge_preparation_cost_per_meter": 120.0,
        "welding_cost_per_meter": 900.0,
        "surface_treatment_cost_per_sqm": 75.0,
    },
    "nozzles": {
        "cutting_cost_per_meter": 80.0,
        "edge_preparation_cost_per_meter": 150.0,
        "welding_cost_per_meter": 900.0,
        "surface_treatment_cost_per_sqm": 75.0,
    },
}

# Cutting and welding stainless/duplex is slower and needs more consumables
MATERIAL_RATE_FACTORS = {
    MaterialCategory.PLATES_CARBON_STEEL: 1.0,
    MaterialCategory.PIPES_CARBON_STEEL: 1.0,
    MaterialCategory.PLATES_STAINLESS_STEEL: 1.5,
    MaterialCategory.PIPES_STAINLESS_304L: 1.5,
    MaterialCategory.PIPES_STAINLESS_316L: 1.5,
    MaterialCategory.PLATES_DUPLEX_STEEL: 1.8,
    MaterialCategory.PLATES_ALLOY_STEEL: 1.3,
    MaterialCategory.PIPES_ALLOY_STEEL: 1.3,
}


def global_rate_defaults() -> dict:
    return {
        "cutting_cost_per_meter": settings.DEFAULT_CUTTING_COST_PER_METER,
        "edge_preparation_cost_per_meter": settings.DEFAULT_EDGE_PREPARATION_COST_PER_METER,
        "welding_cost_per_meter": settings.DEFAULT_WELDING_COST_PER_METER,
        "surface_treatment_cost_per_sqm": settings.DEFAULT_SURFACE_TREATMENT_COST_PER_SQM,
        "base_cost": 0.0,
        "cost_per_kg": 0.0,
        "labor_hours": 0.0,
        "labor_rate_per_hour": settings.LABOR_RATE_PER_HOUR,
    }


def material_rate_factor(material_type: Optional[MaterialCategory]) -> float:
    return MATERIAL_RATE_FACTORS.get(material_type, 1.0)


def resolve_fabrication_rates(
    shape_rates: Optional[FabricationCost],
    shape_category: Optional[ShapeCategory],
    material_type: Optional[MaterialCategory],
    user_rates: Optional[FabricationCost] = None,
) -> FabricationRates:
    """Resolve one rate per operation. Pure: no lookups beyond the static tables."""
    group = group_for_category(shape_category) if shape_category is not None else None
    factor = material_rate_factor(material_type)
    category_defaults = {
        field: rate * factor
        for field, rate in CATEGORY_RATE_DEFAULTS.get(group, {}).items()
    }
    layers = [
        user_rates.model_dump(exclude_none=True) if user_rates else {},
        shape_rates.model_dump(exclude_none=True) if shape_rates else {},
        category_defaults,
        global_rate_defaults(),
    ]

    resolved = {}
    for field in FabricationRates.model_fields:
        for layer in layers:
            if field in layer:
                resolved[field] = layer[field]
                break
    return FabricationRates(**resolved)


def thickness_multiplier(t: Optional[float]) -> float:
    """
    Welding effort scales with plate thickness: 1.0 at the 10 mm reference,
    +2% per mm above it, floored at 0.5 for thin material.
    """
    if t is None:
        return 1.0
    return max(0.5, 1 + (t - 10) / 50)
