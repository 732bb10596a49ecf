"""
Shared test fixtures: test client, sample shapes and materials.
"""

import pytest
from fastapi.testclient import TestClient

from shape_engine.main import app
from shape_engine.models import MaterialCategory, ShapeCategory
from shape_engine.schemas import (
    FabricationRates,
    FormulaDefinition,
    Material,
    MaterialPrice,
    ShapeDefinition,
    ShapeParameter,
)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def steel():
    """Carbon steel at ₹250/kg."""
    return Material(
        id="steel-1",
        name="Carbon Steel",
        category=MaterialCategory.PLATES_CARBON_STEEL,
        density=7850,
        current_price=MaterialPrice(amount=250, currency="INR"),
    )


@pytest.fixture
def plain_plate():
    """Rectangular plate with volume/weight/surface/perimeter only, no composites."""
    return ShapeDefinition(
        id="plain-plate",
        name="Plain Plate",
        category=ShapeCategory.PLATE_RECTANGULAR,
        parameters=[
            ShapeParameter(name="L", label="Length"),
            ShapeParameter(name="W", label="Width"),
            ShapeParameter(name="t", label="Thickness"),
        ],
        formulas={
            "volume": FormulaDefinition(expression="L * W * t", variables=["L", "W", "t"], unit="mm³"),
            "weight": FormulaDefinition(
                expression="L * W * t * density / 1e9",
                variables=["L", "W", "t"],
                unit="kg",
                requires_density=True,
            ),
            "surfaceArea": FormulaDefinition(expression="2 * L * W", variables=["L", "W"], unit="mm²"),
            "perimeter": FormulaDefinition(expression="2 * (L + W)", variables=["L", "W"], unit="mm"),
        },
    )


@pytest.fixture
def flat_rates():
    """Round-number rates so expected costs can be worked by hand."""
    return FabricationRates(
        cutting_cost_per_meter=100,
        edge_preparation_cost_per_meter=50,
        welding_cost_per_meter=200,
        surface_treatment_cost_per_sqm=150,
        base_cost=0,
        cost_per_kg=0,
        labor_hours=0,
        labor_rate_per_hour=500,
    )
