"""
Pressure vessel shells (ASME VIII Div 1), rolled from plate.
"""

from ..models import BlankType, MaterialCategory, PLATE_MATERIALS, ShapeCategory
from ..schemas import (
    BlankDefinition,
    CustomFormula,
    CustomFormulaSet,
    ShapeDefinition,
    ShapeStandard,
    ValidationRule,
)
from .base import formula, param, weight_formula

ASME_VIII = ShapeStandard(
    standard_body="ASME",
    standard_number="BPVC Section VIII Div 1",
    title="Rules for Construction of Pressure Vessels",
)

_SHELL_VOLUME = "pi * ((ID/2 + t)^2 - (ID/2)^2) * L"

CYLINDRICAL_SHELL = ShapeDefinition(
    name="Cylindrical Shell",
    description="Shell course rolled from a single plate with one longitudinal seam",
    category=ShapeCategory.SHELL_CYLINDRICAL,
    standard=ASME_VIII,
    parameters=[
        param("ID", "Inside Diameter", 1, min_value=100, max_value=6000),
        param("t", "Shell Thickness", 2, min_value=3, max_value=200),
        param("L", "Shell Length", 3, min_value=100, max_value=12000),
        param("weldAllowance", "Weld Gap Allowance", 4, default=3, min_value=0, required=False),
        param("lengthAllowance", "Length Allowance", 5, default=10, min_value=0, required=False),
    ],
    formulas={
        "volume": formula(_SHELL_VOLUME, ["ID", "t", "L"], "mm³", "Shell wall volume"),
        "weight": weight_formula(
            _SHELL_VOLUME, ["ID", "t", "L"], "Shell weight",
            expected_range=(0, 100000, "Shell course heavier than 100 t"),
        ),
        "innerSurfaceArea": formula("pi * ID * L", ["ID", "L"], "mm²"),
        "outerSurfaceArea": formula("pi * (ID + 2*t) * L", ["ID", "t", "L"], "mm²"),
        "surfaceArea": formula("pi * (ID + 2*t) * L", ["ID", "t", "L"], "mm²",
                               "Outside surface for painting"),
        "wettedArea": formula("pi * ID * L", ["ID", "L"], "mm²"),
        "finishedArea": formula("pi * (ID + t) * L", ["ID", "t", "L"], "mm²",
                                "Developed plate area at the mean diameter"),
        "blankArea": formula(
            "(L + lengthAllowance) * (pi * (ID + t) + weldAllowance)",
            ["ID", "t", "L", "weldAllowance", "lengthAllowance"], "mm²",
        ),
        # longitudinal seam
        "weldLength": formula("L", ["L"], "mm"),
        # bevels on both long edges and both girth edges
        "edgeLength": formula("2 * L + 2 * pi * (ID + t)", ["ID", "t", "L"], "mm"),
        "perimeter": formula("2 * (L + pi * (ID + t))", ["ID", "t", "L"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.RECTANGULAR,
            blank_length=formula("L + lengthAllowance", ["L", "lengthAllowance"], "mm"),
            blank_width=formula("pi * (ID + t) + weldAllowance", ["ID", "t", "weldAllowance"], "mm"),
            blank_thickness="t",
            scrap_formula=formula(
                "((L + lengthAllowance) * (pi * (ID + t) + weldAllowance) - pi * (ID + t) * L)"
                " / (pi * (ID + t) * L) * 100",
                ["ID", "t", "L", "weldAllowance", "lengthAllowance"], "%",
            ),
            description="Flat plate before rolling",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="OD", label="Outside Diameter", unit="mm", order=1,
                          formula=formula("ID + 2*t", ["ID", "t"], "mm")),
            CustomFormula(name="meanDiameter", label="Mean Diameter", unit="mm", order=2,
                          formula=formula("ID + t", ["ID", "t"], "mm")),
            CustomFormula(name="internalVolume", label="Internal Volume", unit="L", order=3,
                          formula=formula("pi * (ID/2)^2 * L / 1e6", ["ID", "L"], "L")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    tags=["shell", "cylinder", "pressure vessel"],
)

_SLANT = "sqrt(H^2 + ((D1 - D2)/2)^2)"
_CONE_VOLUME = f"pi * ((D1 + D2)/2 + t) * {_SLANT} * t"

CONICAL_SHELL = ShapeDefinition(
    name="Conical Shell",
    description="Concentric reducer section rolled from a developed plate",
    category=ShapeCategory.SHELL_CONICAL,
    standard=ASME_VIII,
    parameters=[
        param("D1", "Large End ID", 1, min_value=100, max_value=6000),
        param("D2", "Small End ID", 2, min_value=50, max_value=6000),
        param("t", "Thickness", 3, min_value=3, max_value=200),
        param("H", "Axial Height", 4, min_value=50, max_value=6000),
    ],
    formulas={
        "volume": formula(_CONE_VOLUME, ["D1", "D2", "t", "H"], "mm³",
                          "Wall volume at the mean surface"),
        "weight": weight_formula(_CONE_VOLUME, ["D1", "D2", "t", "H"], "Cone weight"),
        "innerSurfaceArea": formula(f"pi * (D1/2 + D2/2) * {_SLANT}", ["D1", "D2", "H"], "mm²"),
        "outerSurfaceArea": formula(f"pi * ((D1/2 + t) + (D2/2 + t)) * {_SLANT}",
                                    ["D1", "D2", "t", "H"], "mm²"),
        "surfaceArea": formula(f"pi * ((D1/2 + t) + (D2/2 + t)) * {_SLANT}",
                               ["D1", "D2", "t", "H"], "mm²"),
        "weldLength": formula(_SLANT, ["D1", "D2", "H"], "mm", "Longitudinal seam"),
        "edgeLength": formula(f"2 * {_SLANT} + pi * (D1 + t) + pi * (D2 + t)",
                              ["D1", "D2", "t", "H"], "mm"),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="slantHeight", label="Slant Height", unit="mm", order=1,
                          formula=formula(_SLANT, ["D1", "D2", "H"], "mm")),
            CustomFormula(name="coneAngle", label="Half Apex Angle", unit="deg", order=2,
                          formula=formula("atan((D1 - D2)/(2*H)) * 180 / pi", ["D1", "D2", "H"], "deg",
                                          expected_range=(0, 30, "Cones steeper than 30° need a knuckle"))),
            CustomFormula(name="internalVolume", label="Internal Volume", unit="L", order=3,
                          formula=formula("(pi/3) * H * ((D1/2)^2 + (D1/2)*(D2/2) + (D2/2)^2) / 1e6",
                                          ["D1", "D2", "H"], "L")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    validation_rules=[
        ValidationRule(field="D2", rule="D2_LESS_THAN_D1", severity="error",
                       error_message="Small end diameter must be less than large end diameter"),
    ],
    tags=["shell", "cone", "reducer", "pressure vessel"],
)

PRESSURE_VESSEL_SHAPES = [CYLINDRICAL_SHELL, CONICAL_SHELL]
