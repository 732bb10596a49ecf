"""
Plates: rectangular, circular and free-form plates cut from stock.
"""

from ..models import BlankType, MaterialCategory, PLATE_MATERIALS, ShapeCategory, ShapeType
from ..schemas import (
    BlankDefinition,
    CustomFormula,
    CustomFormulaSet,
    ShapeDefinition,
    ValidationRule,
)
from .base import formula, param, weight_formula

RECTANGULAR_PLATE = ShapeDefinition(
    name="Rectangular Plate",
    description="Flat rectangular plate cut from stock, with a cutting allowance on each edge",
    category=ShapeCategory.PLATE_RECTANGULAR,
    parameters=[
        param("L", "Length", 1, min_value=1, max_value=12000,
              used_in=("volume", "weight", "surfaceArea", "finishedArea", "blankArea", "perimeter")),
        param("W", "Width", 2, min_value=1, max_value=3500,
              used_in=("volume", "weight", "surfaceArea", "finishedArea", "blankArea", "perimeter")),
        param("t", "Thickness", 3, min_value=1, max_value=300, used_in=("volume", "weight")),
        param("allowance", "Cutting Allowance", 4, default=5, min_value=0, max_value=100,
              required=False, description="Extra material per edge for cutting and squaring",
              used_in=("blankArea",)),
    ],
    formulas={
        "volume": formula("L * W * t", ["L", "W", "t"], "mm³", "Plate volume"),
        "weight": weight_formula(
            "L * W * t", ["L", "W", "t"], "Plate weight",
            expected_range=(0, 50000, "Plate heavier than 50 t, check dimensions"),
        ),
        "surfaceArea": formula("2 * L * W", ["L", "W"], "mm²", "Both faces"),
        "finishedArea": formula("L * W", ["L", "W"], "mm²"),
        "blankArea": formula(
            "(L + 2*allowance) * (W + 2*allowance)", ["L", "W", "allowance"], "mm²",
            "Stock area including cutting allowance",
        ),
        "edgeLength": formula("2 * (L + W)", ["L", "W"], "mm"),
        "perimeter": formula("2 * (L + W)", ["L", "W"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.RECTANGULAR,
            blank_length=formula("L + 2 * allowance", ["L", "allowance"], "mm"),
            blank_width=formula("W + 2 * allowance", ["W", "allowance"], "mm"),
            blank_thickness="t",
            scrap_formula=formula(
                "((L + 2*allowance) * (W + 2*allowance) - L * W) / (L * W) * 100",
                ["L", "W", "allowance"], "%",
            ),
            description="Rectangular blank with allowance on all sides",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="area", label="Plate Area", unit="mm²", order=1,
                          formula=formula("L * W", ["L", "W"], "mm²")),
            CustomFormula(name="diagonal", label="Diagonal", unit="mm", order=2,
                          formula=formula("sqrt(L^2 + W^2)", ["L", "W"], "mm")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    validation_rules=[
        ValidationRule(field="L", rule="LENGTH_GT_WIDTH",
                       error_message="By convention, length should be greater than or equal to width"),
        ValidationRule(field="t", rule="THICKNESS_PRACTICAL",
                       error_message="Plates thicker than 150 mm may need special sourcing"),
    ],
    tags=["plate", "rectangular", "flat"],
)

CIRCULAR_PLATE = ShapeDefinition(
    name="Circular Plate",
    description="Circular disc cut from a circular blank",
    category=ShapeCategory.PLATE_CIRCULAR,
    parameters=[
        param("D", "Diameter", 1, min_value=10, max_value=6000),
        param("t", "Thickness", 2, min_value=1, max_value=300),
        param("allowance", "Cutting Allowance", 3, default=5, min_value=0, max_value=100,
              required=False),
    ],
    formulas={
        "volume": formula("pi * (D/2)^2 * t", ["D", "t"], "mm³", "Disc volume"),
        "weight": weight_formula("pi * (D/2)^2 * t", ["D", "t"], "Disc weight"),
        "surfaceArea": formula("2 * pi * (D/2)^2", ["D"], "mm²", "Both faces"),
        "finishedArea": formula("pi * (D/2)^2", ["D"], "mm²"),
        "edgeLength": formula("pi * D", ["D"], "mm"),
        "perimeter": formula("pi * D", ["D"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("D + 2 * allowance", ["D", "allowance"], "mm"),
            blank_thickness="t",
            scrap_formula=formula(
                "((D + 2*allowance)^2 - D^2) / D^2 * 100", ["D", "allowance"], "%",
            ),
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="circumference", label="Circumference", unit="mm", order=1,
                          formula=formula("pi * D", ["D"], "mm")),
            CustomFormula(name="area", label="Area", unit="mm²", order=2,
                          formula=formula("pi * (D/2)^2", ["D"], "mm²")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    validation_rules=[
        ValidationRule(field="D", rule="DIAMETER_PRACTICAL",
                       error_message="Very large diameters may require special handling and cutting equipment"),
    ],
    tags=["plate", "circular", "disc"],
)

CUSTOM_PLATE = ShapeDefinition(
    name="Custom Plate",
    description="Free-form plate described by its net area and cut perimeter",
    category=ShapeCategory.PLATE_CUSTOM,
    shape_type=ShapeType.CUSTOM,
    parameters=[
        param("area", "Net Area", 1, unit="mm²", min_value=1),
        param("perimeter", "Cut Perimeter", 2, min_value=1),
        param("t", "Thickness", 3, min_value=1, max_value=300),
        param("scrapPct", "Scrap Allowance", 4, unit="%", default=15, min_value=0, max_value=100,
              required=False),
    ],
    formulas={
        "volume": formula("area * t", ["area", "t"], "mm³"),
        "weight": weight_formula("area * t", ["area", "t"]),
        "surfaceArea": formula("2 * area", ["area"], "mm²"),
        "finishedArea": formula("area", ["area"], "mm²"),
        "blankArea": formula("area * (1 + scrapPct/100)", ["area", "scrapPct"], "mm²"),
        "scrapPercentage": formula("scrapPct", ["scrapPct"], "%"),
        "edgeLength": formula("perimeter", ["perimeter"], "mm"),
        "perimeter": formula("perimeter", ["perimeter"], "mm"),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    validation_rules=[
        ValidationRule(field="scrapPct", rule="SCRAP_REASONABLE",
                       error_message="Scrap percentage above 50% indicates inefficient material usage"),
    ],
    is_standard=False,
    tags=["plate", "custom", "profile"],
)

PLATE_SHAPES = [RECTANGULAR_PLATE, CIRCULAR_PLATE, CUSTOM_PLATE]
