"""
Formed vessel heads. Volumes include the straight flange (SF).
"""

from ..models import BlankType, MaterialCategory, PLATE_MATERIALS, ShapeCategory
from ..schemas import (
    BlankDefinition,
    CustomFormula,
    CustomFormulaSet,
    FabricationCost,
    ShapeDefinition,
)
from .base import formula, param, weight_formula
from .pressure_vessels import ASME_VIII

_FLANGE_VOLUME = "pi * ((ID/2 + t)^2 - (ID/2)^2) * SF"


def _head_parameters():
    return [
        param("ID", "Inside Diameter", 1, min_value=100, max_value=6000),
        param("t", "Thickness", 2, min_value=3, max_value=150),
        param("SF", "Straight Flange", 3, default=50, min_value=0, max_value=200, required=False),
    ]


_HEMI_VOLUME = f"(2/3) * pi * ((ID/2 + t)^3 - (ID/2)^3) + {_FLANGE_VOLUME}"

HEMISPHERICAL_HEAD = ShapeDefinition(
    name="Hemispherical Head",
    description="Hemispherical head with straight flange",
    category=ShapeCategory.HEAD_HEMISPHERICAL,
    standard=ASME_VIII,
    parameters=_head_parameters(),
    formulas={
        "volume": formula(_HEMI_VOLUME, ["ID", "t", "SF"], "mm³"),
        "weight": weight_formula(_HEMI_VOLUME, ["ID", "t", "SF"], "Head weight"),
        "innerSurfaceArea": formula("2 * pi * (ID/2)^2 + pi * ID * SF", ["ID", "SF"], "mm²"),
        "outerSurfaceArea": formula("2 * pi * (ID/2 + t)^2 + pi * (ID + 2*t) * SF",
                                    ["ID", "t", "SF"], "mm²"),
        "surfaceArea": formula("2 * pi * (ID/2 + t)^2 + pi * (ID + 2*t) * SF",
                               ["ID", "t", "SF"], "mm²"),
        "wettedArea": formula("2 * pi * (ID/2)^2 + pi * ID * SF", ["ID", "SF"], "mm²"),
        "weldLength": formula("pi * (ID + 2*t)", ["ID", "t"], "mm", "Girth seam to shell"),
        "edgeLength": formula("pi * (ID + 2*t)", ["ID", "t"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("1.42 * (ID + 2*t) + 2*SF + 100", ["ID", "t", "SF"], "mm"),
            blank_thickness="t",
            description="Circular blank before pressing",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="height", label="Overall Height", unit="mm", order=1,
                          formula=formula("ID/2 + t + SF", ["ID", "t", "SF"], "mm")),
            CustomFormula(name="internalVolume", label="Internal Volume", unit="L", order=2,
                          formula=formula("((2/3) * pi * (ID/2)^3 + pi * (ID/2)^2 * SF) / 1e6",
                                          ["ID", "SF"], "L")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    tags=["head", "hemispherical", "pressure vessel"],
)

_ELLIPSOIDAL_VOLUME = (
    f"(2/3) * pi * ((ID/2 + t)^2 * (ID/4 + t) - (ID/2)^2 * (ID/4)) + {_FLANGE_VOLUME}"
)

ELLIPSOIDAL_HEAD = ShapeDefinition(
    name="Ellipsoidal Head (2:1)",
    description="2:1 semi-ellipsoidal head with straight flange",
    category=ShapeCategory.HEAD_ELLIPSOIDAL,
    standard=ASME_VIII,
    parameters=_head_parameters(),
    formulas={
        "volume": formula(_ELLIPSOIDAL_VOLUME, ["ID", "t", "SF"], "mm³"),
        "weight": weight_formula(_ELLIPSOIDAL_VOLUME, ["ID", "t", "SF"], "Head weight"),
        # 1.09·D² is the standard dished-area factor for a 2:1 head
        "innerSurfaceArea": formula("1.09 * ID^2 + pi * ID * SF", ["ID", "SF"], "mm²"),
        "outerSurfaceArea": formula("1.09 * (ID + 2*t)^2 + pi * (ID + 2*t) * SF",
                                    ["ID", "t", "SF"], "mm²"),
        "surfaceArea": formula("1.09 * (ID + 2*t)^2 + pi * (ID + 2*t) * SF",
                               ["ID", "t", "SF"], "mm²"),
        "weldLength": formula("pi * (ID + 2*t)", ["ID", "t"], "mm", "Girth seam to shell"),
        "edgeLength": formula("pi * (ID + 2*t)", ["ID", "t"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("1.2 * (ID + 2*t) + 2*SF", ["ID", "t", "SF"], "mm"),
            blank_thickness="t",
            description="Circular blank before dishing and flanging",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="height", label="Dish Depth", unit="mm", order=1,
                          formula=formula("ID/4", ["ID"], "mm")),
            CustomFormula(name="totalHeight", label="Overall Height", unit="mm", order=2,
                          formula=formula("ID/4 + t + SF", ["ID", "t", "SF"], "mm")),
            CustomFormula(name="internalVolume", label="Internal Volume", unit="L", order=3,
                          formula=formula("(pi * ID^3 / 24 + pi * (ID/2)^2 * SF) / 1e6",
                                          ["ID", "SF"], "L")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    tags=["head", "ellipsoidal", "2:1", "pressure vessel"],
)

FLAT_HEAD = ShapeDefinition(
    name="Flat Head",
    description="Flat circular cover or blind head",
    category=ShapeCategory.HEAD_FLAT,
    standard=ASME_VIII,
    parameters=[
        param("D", "Diameter", 1, min_value=50, max_value=6000),
        param("t", "Thickness", 2, min_value=3, max_value=300),
    ],
    formulas={
        "volume": formula("pi * (D/2)^2 * t", ["D", "t"], "mm³"),
        "weight": weight_formula("pi * (D/2)^2 * t", ["D", "t"], "Head weight"),
        "surfaceArea": formula("2 * pi * (D/2)^2 + pi * D * t", ["D", "t"], "mm²"),
        "wettedArea": formula("pi * (D/2)^2", ["D"], "mm²"),
        "finishedArea": formula("pi * (D/2)^2", ["D"], "mm²"),
        "perimeter": formula("pi * D", ["D"], "mm"),
        "weldLength": formula("pi * D", ["D"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("D + 50", ["D"], "mm"),
            blank_thickness="t",
            scrap_formula=formula("((D + 50)^2 - D^2) / D^2 * 100", ["D"], "%"),
        ),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    tags=["head", "flat", "cover"],
)


# F&D head: crown radius = ID, knuckle radius = 6% of ID
_TORI_VOLUME = (
    "(pi/24) * (ID + 2*t)^2 * (2*(ID + 2*t) + 3*0.06*(ID + 2*t))"
    f" - (pi/24) * ID^2 * (2*ID + 3*0.06*ID) + {_FLANGE_VOLUME}"
)

TORISPHERICAL_HEAD = ShapeDefinition(
    name="Torispherical Head (F&D)",
    description="Flanged and dished head, 100% crown radius and 6% knuckle radius",
    category=ShapeCategory.HEAD_TORISPHERICAL,
    standard=ASME_VIII,
    parameters=[
        param("ID", "Inside Diameter", 1, min_value=100, max_value=10000),
        param("t", "Thickness", 2, min_value=3, max_value=200),
        param("SF", "Straight Flange", 3, default=50, min_value=25, max_value=300, required=False),
    ],
    formulas={
        "volume": formula(_TORI_VOLUME, ["ID", "t", "SF"], "mm³"),
        "weight": weight_formula(_TORI_VOLUME, ["ID", "t", "SF"], "Head weight"),
        "innerSurfaceArea": formula("1.08 * ID^2 + pi * ID * SF", ["ID", "SF"], "mm²"),
        "outerSurfaceArea": formula("1.08 * (ID + 2*t)^2 + pi * (ID + 2*t) * SF",
                                    ["ID", "t", "SF"], "mm²"),
        "surfaceArea": formula("1.08 * (ID + 2*t)^2 + pi * (ID + 2*t) * SF",
                               ["ID", "t", "SF"], "mm²"),
        "weldLength": formula("pi * (ID + 2*t)", ["ID", "t"], "mm", "Girth seam to shell"),
        "edgeLength": formula("pi * (ID + 2*t)", ["ID", "t"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("ID + 2*t + 2*SF + 100", ["ID", "t", "SF"], "mm"),
            blank_thickness="t",
            description="Circular blank before dishing and flanging",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="crownRadius", label="Crown Radius", unit="mm", order=1,
                          formula=formula("ID", ["ID"], "mm")),
            CustomFormula(name="knuckleRadius", label="Knuckle Radius", unit="mm", order=2,
                          formula=formula("0.06 * ID", ["ID"], "mm")),
            CustomFormula(name="crownHeight", label="Dish Depth", unit="mm", order=3,
                          formula=formula("0.169 * ID", ["ID"], "mm")),
            CustomFormula(name="totalHeight", label="Overall Height", unit="mm", order=4,
                          formula=formula("0.169 * ID + SF", ["ID", "SF"], "mm")),
            CustomFormula(name="internalVolume", label="Internal Volume", unit="L", order=5,
                          formula=formula(
                              "((pi/24) * ID^2 * (2*ID + 3*0.06*ID) + pi * (ID/2)^2 * SF) / 1e6",
                              ["ID", "SF"], "L",
                          )),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    fabrication_cost=FabricationCost(cutting_cost_per_meter=60, surface_treatment_cost_per_sqm=180),
    tags=["head", "torispherical", "f&d", "pressure vessel"],
)

# Cone shell taken at its mid-wall radius, plus the cylindrical flange
_SLANT = "sqrt(H^2 + (D/2)^2)"
_CONE_VOLUME = (
    f"pi * (D/2 + t/2) * {_SLANT} * t + pi * ((D/2 + t)^2 - (D/2)^2) * SF"
)

CONICAL_HEAD = ShapeDefinition(
    name="Conical Head",
    description="Conical closure with straight flange",
    category=ShapeCategory.HEAD_CONICAL,
    standard=ASME_VIII,
    parameters=[
        param("D", "Base Diameter", 1, min_value=100, max_value=10000),
        param("t", "Thickness", 2, min_value=3, max_value=200),
        param("H", "Cone Height", 3, min_value=50, max_value=10000),
        param("SF", "Straight Flange", 4, default=50, min_value=0, max_value=300, required=False),
    ],
    formulas={
        "volume": formula(_CONE_VOLUME, ["D", "t", "H", "SF"], "mm³"),
        "weight": weight_formula(_CONE_VOLUME, ["D", "t", "H", "SF"], "Head weight"),
        "innerSurfaceArea": formula(f"pi * (D/2) * {_SLANT} + pi * D * SF", ["D", "H", "SF"], "mm²"),
        "outerSurfaceArea": formula(f"pi * (D/2 + t) * {_SLANT} + pi * (D + 2*t) * SF",
                                    ["D", "t", "H", "SF"], "mm²"),
        "surfaceArea": formula(f"pi * (D/2 + t) * {_SLANT} + pi * (D + 2*t) * SF",
                               ["D", "t", "H", "SF"], "mm²"),
        # longitudinal seam of the rolled cone plus the girth seam
        "weldLength": formula(f"{_SLANT} + SF + pi * (D + 2*t)", ["D", "t", "H", "SF"], "mm"),
        "edgeLength": formula("pi * (D + 2*t)", ["D", "t"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula(f"2 * ({_SLANT} + SF) + 50", ["D", "H", "SF"], "mm"),
            blank_thickness="t",
            description="Circular blank the cone pattern is cut from",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="slantHeight", label="Slant Height", unit="mm", order=1,
                          formula=formula(_SLANT, ["D", "H"], "mm")),
            CustomFormula(name="coneAngle", label="Half Apex Angle", unit="deg", order=2,
                          formula=formula("atan((D/2) / H) * 180 / pi", ["D", "H"], "deg",
                                          expected_range=(0, 60, "Cone half angle above 60°"))),
            CustomFormula(name="totalHeight", label="Overall Height", unit="mm", order=3,
                          formula=formula("H + SF", ["H", "SF"], "mm")),
            CustomFormula(name="internalVolume", label="Internal Volume", unit="L", order=4,
                          formula=formula("((pi/3) * (D/2)^2 * H + pi * (D/2)^2 * SF) / 1e6",
                                          ["D", "H", "SF"], "L")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    fabrication_cost=FabricationCost(
        cutting_cost_per_meter=70, welding_cost_per_meter=180, surface_treatment_cost_per_sqm=180,
    ),
    tags=["head", "conical", "pressure vessel"],
)

HEAD_SHAPES = [HEMISPHERICAL_HEAD, ELLIPSOIDAL_HEAD, FLAT_HEAD, TORISPHERICAL_HEAD, CONICAL_HEAD]
