"""
Batch evaluation and fabrication rate resolution tests.

Tests:
1-4.  Batch evaluation isolates failures
5-10. Rate precedence and material factors
11-13. Thickness multiplier
"""

import logging

import pytest

from shape_engine.calculators.batch import evaluate_all, evaluate_all_detailed
from shape_engine.calculators.fabrication_rates import (
    resolve_fabrication_rates,
    thickness_multiplier,
)
from shape_engine.models import BlankType, MaterialCategory, ShapeCategory
from shape_engine.schemas import BlankDefinition, FabricationCost, FormulaDefinition


def _sample_formulas():
    return {
        "volume": FormulaDefinition(expression="L * W * t", variables=["L", "W", "t"]),
        "weldLength": FormulaDefinition(expression="L * x", variables=["L", "x"]),
        "perimeter": FormulaDefinition(expression="2 * (L + ", variables=["L"]),
        "blankDimensions": BlankDefinition(blank_type=BlankType.CUSTOM),
    }


# ============================================================
# Batch evaluation
# ============================================================

def test_failing_formulas_are_dropped(caplog):
    with caplog.at_level(logging.ERROR, logger="shape_engine.calculators.batch"):
        results = evaluate_all(_sample_formulas(), {"L": 1000, "W": 500, "t": 10})

    assert list(results.keys()) == ["volume"]
    assert results["volume"].result == 5_000_000
    assert "Error evaluating formula weldLength" in caplog.text
    assert "Error evaluating formula perimeter" in caplog.text


def test_detailed_evaluation_reports_errors():
    results, errors = evaluate_all_detailed(_sample_formulas(), {"L": 1000, "W": 500, "t": 10})

    assert set(results) == {"volume"}
    assert errors["weldLength"] == "Missing required variables: x"
    assert errors["perimeter"].startswith("Invalid formula syntax")
    assert "blankDimensions" not in errors


def test_deeply_nested_formula_is_isolated():
    formulas = {
        "perimeter": FormulaDefinition(expression="2 * (L + W)", variables=["L", "W"]),
        "nested": FormulaDefinition(expression="(" * 2000 + "L" + ")" * 2000, variables=["L"]),
    }
    assert set(evaluate_all(formulas, {"L": 1000, "W": 500})) == {"perimeter"}

    results, errors = evaluate_all_detailed(formulas, {"L": 1000, "W": 500})
    assert results["perimeter"].result == 3000
    assert "nested deeper than" in errors["nested"]


def test_density_is_passed_to_every_formula():
    formulas = {
        "weight": FormulaDefinition(expression="V * density / 1e9", variables=["V"], requires_density=True),
        "mass": FormulaDefinition(expression="density", requires_density=True),
    }
    results = evaluate_all(formulas, {"V": 1e9}, density=8000)
    assert results["weight"].result == 8000
    assert results["mass"].result == 8000


# ============================================================
# Rate resolution
# ============================================================

def test_ungrouped_category_uses_global_defaults():
    rates = resolve_fabrication_rates(None, ShapeCategory.CUSTOM_BRACKET, None)
    assert rates.cutting_cost_per_meter == 50
    assert rates.edge_preparation_cost_per_meter == 100
    assert rates.welding_cost_per_meter == 500
    assert rates.surface_treatment_cost_per_sqm == 50
    assert rates.labor_rate_per_hour == 500
    assert rates.base_cost == 0


def test_category_group_defaults():
    rates = resolve_fabrication_rates(
        None, ShapeCategory.HEAD_ELLIPSOIDAL, MaterialCategory.PLATES_CARBON_STEEL
    )
    assert rates.welding_cost_per_meter == 800
    assert rates.edge_preparation_cost_per_meter == 150


def test_material_factor_scales_category_defaults():
    rates = resolve_fabrication_rates(
        None, ShapeCategory.PLATE_RECTANGULAR, MaterialCategory.PLATES_STAINLESS_STEEL
    )
    assert rates.cutting_cost_per_meter == pytest.approx(75)
    assert rates.welding_cost_per_meter == pytest.approx(750)
    # labor rate is not a category default
    assert rates.labor_rate_per_hour == 500


def test_shape_rates_are_not_scaled_by_material():
    rates = resolve_fabrication_rates(
        FabricationCost(cutting_cost_per_meter=80, labor_hours=4),
        ShapeCategory.PLATE_RECTANGULAR,
        MaterialCategory.PLATES_DUPLEX_STEEL,
    )
    assert rates.cutting_cost_per_meter == 80
    assert rates.labor_hours == 4
    assert rates.welding_cost_per_meter == pytest.approx(900)


def test_user_rates_win():
    rates = resolve_fabrication_rates(
        FabricationCost(cutting_cost_per_meter=80),
        ShapeCategory.PLATE_RECTANGULAR,
        MaterialCategory.PLATES_CARBON_STEEL,
        user_rates=FabricationCost(cutting_cost_per_meter=120, labor_rate_per_hour=650),
    )
    assert rates.cutting_cost_per_meter == 120
    assert rates.labor_rate_per_hour == 650


def test_unknown_material_factor_is_one():
    rates = resolve_fabrication_rates(None, ShapeCategory.TUBE_STRAIGHT, MaterialCategory.OTHER)
    assert rates.cutting_cost_per_meter == 80


# ============================================================
# Thickness multiplier
# ============================================================

def test_thickness_multiplier_reference_point():
    assert thickness_multiplier(10) == 1.0
    assert thickness_multiplier(None) == 1.0


def test_thickness_multiplier_grows_two_percent_per_mm():
    assert thickness_multiplier(20) == pytest.approx(1.2)
    assert thickness_multiplier(60) == pytest.approx(2.0)


def test_thickness_multiplier_floor():
    assert thickness_multiplier(0) == pytest.approx(0.8)
    assert thickness_multiplier(-50) == 0.5
