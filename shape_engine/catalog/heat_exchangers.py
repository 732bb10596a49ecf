"""
Shell-and-tube heat exchanger parts (TEMA): drilled plates and the tube
bundle. Tube holes are drilled, and the drilled circumference is billed
with the cut perimeter.
"""

from ..models import (
    BlankType,
    MaterialCategory,
    PIPE_MATERIALS,
    PLATE_MATERIALS,
    ShapeCategory,
    ShapeType,
)
from ..schemas import (
    BlankDefinition,
    CustomFormula,
    CustomFormulaSet,
    FabricationCost,
    ShapeDefinition,
    ShapeStandard,
)
from .base import formula, param, weight_formula

TEMA = ShapeStandard(
    standard_body="TEMA",
    standard_number="10th Edition",
    title="Standards of the Tubular Exchanger Manufacturers Association",
)

_HOLES = "N * pi * (tubeOD/2)^2"
_TUBESHEET_VOLUME = f"(pi * (D/2)^2 - {_HOLES}) * t"

TUBE_SHEET = ShapeDefinition(
    name="HX Tube Sheet",
    description="Drilled tube sheet",
    category=ShapeCategory.HX_TUBE_SHEET,
    standard=TEMA,
    parameters=[
        param("D", "Outside Diameter", 1, min_value=100, max_value=4000),
        param("t", "Thickness", 2, min_value=10, max_value=300),
        param("tubeOD", "Tube OD", 3, min_value=6, max_value=50),
        param("N", "Number of Tubes", 4, unit="", min_value=1, max_value=10000),
    ],
    formulas={
        "volume": formula(_TUBESHEET_VOLUME, ["D", "t", "tubeOD", "N"], "mm³"),
        "weight": weight_formula(_TUBESHEET_VOLUME, ["D", "t", "tubeOD", "N"], "Drilled weight"),
        "surfaceArea": formula(
            f"2 * (pi * (D/2)^2 - {_HOLES}) + N * pi * tubeOD * t",
            ["D", "t", "tubeOD", "N"], "mm²", "Faces less holes, plus hole bores",
        ),
        "finishedArea": formula("pi * (D/2)^2", ["D"], "mm²"),
        "perimeter": formula("pi * D + N * pi * tubeOD", ["D", "tubeOD", "N"], "mm"),
        "edgeLength": formula("pi * D", ["D"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("D + 50", ["D"], "mm"),
            blank_thickness="t",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="holeArea", label="Total Hole Area", unit="mm²", order=1,
                          formula=formula(_HOLES, ["tubeOD", "N"], "mm²")),
            CustomFormula(
                name="ligamentEfficiency", label="Ligament Efficiency", unit="%", order=2,
                formula=formula(
                    f"(1 - ({_HOLES}) / (pi * (D/2)^2)) * 100", ["D", "tubeOD", "N"], "%",
                    expected_range=(20, 100, "Ligament efficiency below 20%, check tube count"),
                ),
            ),
            CustomFormula(name="grossWeight", label="Undrilled Weight", unit="kg", order=3,
                          formula=weight_formula("pi * (D/2)^2 * t", ["D", "t"])),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    tags=["heat exchanger", "tube sheet", "tema"],
)

# Segmental baffle: a circle of diameter D less a segment of depth
# baffleCut% of D. theta is the half-angle of the removed segment.
_COS = "(1 - 2*baffleCut/100)"
_THETA = f"acos{_COS}"
_BAFFLE_AREA = f"(D/2)^2 * (pi - {_THETA} + {_COS} * sqrt(1 - {_COS}^2))"
_BAFFLE_VOLUME = f"({_BAFFLE_AREA} - {_HOLES}) * t"

BAFFLE = ShapeDefinition(
    name="HX Baffle",
    description="Single-segmental baffle plate",
    category=ShapeCategory.HX_BAFFLE,
    standard=TEMA,
    parameters=[
        param("D", "Baffle Diameter", 1, min_value=100, max_value=4000),
        param("t", "Thickness", 2, min_value=3, max_value=50),
        param("baffleCut", "Baffle Cut", 3, unit="%", default=25, min_value=15, max_value=45),
        param("tubeOD", "Tube OD", 4, min_value=6, max_value=50),
        param("N", "Tubes Through Baffle", 5, unit="", min_value=1, max_value=10000),
    ],
    formulas={
        "volume": formula(_BAFFLE_VOLUME, ["D", "t", "baffleCut", "tubeOD", "N"], "mm³"),
        "weight": weight_formula(_BAFFLE_VOLUME, ["D", "t", "baffleCut", "tubeOD", "N"],
                                 "Baffle weight"),
        "surfaceArea": formula(f"2 * ({_BAFFLE_AREA} - {_HOLES})",
                               ["D", "baffleCut", "tubeOD", "N"], "mm²"),
        "finishedArea": formula(_BAFFLE_AREA, ["D", "baffleCut"], "mm²"),
        "perimeter": formula(
            f"D * (pi - {_THETA}) + D * sqrt(1 - {_COS}^2) + N * pi * tubeOD",
            ["D", "baffleCut", "tubeOD", "N"], "mm", "Outer arc, cut chord and tube holes",
        ),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("D + 20", ["D"], "mm"),
            blank_thickness="t",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="segmentArea", label="Cut Segment Area", unit="mm²", order=1,
                          formula=formula(f"pi * (D/2)^2 - {_BAFFLE_AREA}", ["D", "baffleCut"], "mm²")),
            CustomFormula(name="chordLength", label="Cut Chord Length", unit="mm", order=2,
                          formula=formula(f"D * sqrt(1 - {_COS}^2)", ["D", "baffleCut"], "mm")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    tags=["heat exchanger", "baffle", "tema"],
)


_WALL = "pi * ((OD/2)^2 - ((OD - 2*t)/2)^2)"

TUBE_BUNDLE = ShapeDefinition(
    name="HX Tube Bundle",
    description="Bundle of straight heat exchanger tubes of one size",
    category=ShapeCategory.HX_TUBE_BUNDLE,
    shape_type=ShapeType.PARAMETRIC,
    standard=TEMA,
    parameters=[
        param("OD", "Tube OD", 1, min_value=10, max_value=100),
        param("t", "Tube Wall Thickness", 2, min_value=0.5, max_value=10),
        param("L", "Tube Length", 3, min_value=500, max_value=12000),
        param("N", "Number of Tubes", 4, unit="", min_value=1, max_value=10000),
    ],
    formulas={
        "volume": formula(f"N * {_WALL} * L", ["OD", "t", "L", "N"], "mm³"),
        "weight": weight_formula(f"N * {_WALL} * L", ["OD", "t", "L", "N"], "Bundle weight"),
        "outerSurfaceArea": formula("N * pi * OD * L", ["OD", "L", "N"], "mm²"),
        "innerSurfaceArea": formula("N * pi * (OD - 2*t) * L", ["OD", "t", "L", "N"], "mm²"),
        "surfaceArea": formula("N * pi * (2*OD - 2*t) * L", ["OD", "t", "L", "N"], "mm²",
                               "Inside and outside"),
        # tube-to-tubesheet welds at both ends
        "weldLength": formula("2 * N * pi * OD", ["OD", "N"], "mm"),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="totalTubeLength", label="Total Tube Length", unit="mm", order=1,
                          formula=formula("N * L", ["L", "N"], "mm")),
            CustomFormula(name="tubeID", label="Tube ID", unit="mm", order=2,
                          formula=formula("OD - 2*t", ["OD", "t"], "mm")),
            CustomFormula(name="flowArea", label="Tube-Side Flow Area", unit="mm²", order=3,
                          formula=formula("N * pi * ((OD - 2*t)/2)^2", ["OD", "t", "N"], "mm²")),
            CustomFormula(name="heatTransferArea", label="Heat Transfer Area", unit="m²", order=4,
                          formula=formula("N * pi * OD * L / 1e6", ["OD", "L", "N"], "m²")),
        ]),
    },
    allowed_material_categories=PIPE_MATERIALS,
    default_material_category=MaterialCategory.PIPES_CARBON_STEEL,
    fabrication_cost=FabricationCost(welding_cost_per_meter=100),
    tags=["heat exchanger", "tube bundle", "tema", "tubes"],
)

_SUPPORT_HOLES = "N * pi * (holeD/2)^2"
_SUPPORT_VOLUME = f"(pi * (D/2)^2 - {_SUPPORT_HOLES}) * t"

TUBE_SUPPORT = ShapeDefinition(
    name="HX Tube Support Plate",
    description="Full-circle support plate drilled for the tubes",
    category=ShapeCategory.HX_TUBE_SUPPORT,
    standard=TEMA,
    parameters=[
        param("D", "Plate Diameter", 1, min_value=200, max_value=3000),
        param("t", "Thickness", 2, min_value=3, max_value=25),
        param("holeD", "Hole Diameter", 3, min_value=10, max_value=100),
        param("N", "Number of Holes", 4, unit="", min_value=1, max_value=10000),
    ],
    formulas={
        "volume": formula(_SUPPORT_VOLUME, ["D", "t", "holeD", "N"], "mm³"),
        "weight": weight_formula(_SUPPORT_VOLUME, ["D", "t", "holeD", "N"], "Drilled weight"),
        "surfaceArea": formula(f"2 * (pi * (D/2)^2 - {_SUPPORT_HOLES})", ["D", "holeD", "N"], "mm²"),
        "finishedArea": formula("pi * (D/2)^2", ["D"], "mm²"),
        "perimeter": formula("pi * D + N * pi * holeD", ["D", "holeD", "N"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("D + 20", ["D"], "mm"),
            blank_thickness="t",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="plateArea", label="Plate Area", unit="mm²", order=1,
                          formula=formula("pi * (D/2)^2", ["D"], "mm²")),
            CustomFormula(name="holeArea", label="Total Hole Area", unit="mm²", order=2,
                          formula=formula(_SUPPORT_HOLES, ["holeD", "N"], "mm²")),
            CustomFormula(
                name="openArea", label="Open Area", unit="%", order=3,
                formula=formula("N * (holeD / D)^2 * 100", ["D", "holeD", "N"], "%",
                                expected_range=(0, 60, "Open area above 60%, plate may be too weak")),
            ),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    fabrication_cost=FabricationCost(cutting_cost_per_meter=50, surface_treatment_cost_per_sqm=120),
    tags=["heat exchanger", "tube support", "tema"],
)

HEAT_EXCHANGER_SHAPES = [TUBE_SHEET, BAFFLE, TUBE_BUNDLE, TUBE_SUPPORT]
