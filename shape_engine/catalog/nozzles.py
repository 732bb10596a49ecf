from ..models import (
    BlankType,
    MaterialCategory,
    ParameterDataType,
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
    ShapeParameter,
    ValidationRule,
)
from .base import MM3_PER_M3, formula, param, select_param, weight_formula
from .pressure_vessels import ASME_VIII

_ANNULUS = "pi * ((padOD/2)^2 - (nozzleOD/2)^2)"

REINFORCEMENT_PAD = ShapeDefinition(
    name="Reinforcement Pad",
    description="Annular repad welded around a nozzle opening",
    category=ShapeCategory.REINFORCEMENT_PAD,
    standard=ASME_VIII,
    parameters=[
        param("padOD", "Pad Outside Diameter", 1, min_value=50, max_value=3000),
        param("nozzleOD", "Nozzle Outside Diameter", 2, min_value=20, max_value=2500),
        param("t", "Pad Thickness", 3, min_value=3, max_value=100),
    ],
    formulas={
        "volume": formula(f"{_ANNULUS} * t", ["padOD", "nozzleOD", "t"], "mm³"),
        "weight": weight_formula(f"{_ANNULUS} * t", ["padOD", "nozzleOD", "t"], "Pad weight"),
        "surfaceArea": formula(f"2 * {_ANNULUS}", ["padOD", "nozzleOD"], "mm²"),
        "finishedArea": formula(_ANNULUS, ["padOD", "nozzleOD"], "mm²"),
        # fillet welds at the outer edge and at the nozzle neck
        "weldLength": formula("pi * padOD + pi * nozzleOD", ["padOD", "nozzleOD"], "mm"),
        "perimeter": formula("pi * padOD + pi * nozzleOD", ["padOD", "nozzleOD"], "mm"),
        "blankDimensions": BlankDefinition(
            blank_type=BlankType.CIRCULAR,
            blank_diameter=formula("padOD + 20", ["padOD"], "mm"),
            blank_thickness="t",
        ),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="extension", label="Radial Extension", unit="mm", order=1,
                          formula=formula("(padOD - nozzleOD) / 2", ["padOD", "nozzleOD"], "mm",
                                          expected_range=(50, 1000))),
            CustomFormula(name="reinforcementArea", label="Reinforcement Area", unit="mm²", order=2,
                          formula=formula("(padOD - nozzleOD) * t", ["padOD", "nozzleOD", "t"], "mm²")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    validation_rules=[
        ValidationRule(field="padOD", rule="PAD_EXTENSION",
                       error_message="Pad should extend at least 50mm beyond nozzle OD on all sides"),
    ],
    tags=["nozzle", "repad", "reinforcement"],
)

_BOX_VOLUME = "2 * (length + width) * t * projection"

RECTANGULAR_NOZZLE = ShapeDefinition(
    name="Custom Rectangular Nozzle",
    description="Rectangular nozzle neck fabricated from four plates",
    category=ShapeCategory.NOZZLE_CUSTOM_RECTANGULAR,
    shape_type=ShapeType.CUSTOM,
    parameters=[
        param("length", "Opening Length", 1, min_value=50, max_value=3000),
        param("width", "Opening Width", 2, min_value=50, max_value=3000),
        param("t", "Plate Thickness", 3, min_value=3, max_value=50),
        param("projection", "Projection", 4, min_value=50, max_value=1000),
    ],
    formulas={
        "volume": formula(_BOX_VOLUME, ["length", "width", "t", "projection"], "mm³"),
        "weight": weight_formula(_BOX_VOLUME, ["length", "width", "t", "projection"], "Neck weight"),
        "surfaceArea": formula("4 * (length + width) * projection",
                               ["length", "width", "projection"], "mm²", "Inside and outside"),
        # four corner seams plus the shell and flange joints
        "weldLength": formula("4 * projection + 4 * (length + width)",
                              ["length", "width", "projection"], "mm"),
        "perimeter": formula("4 * (length + width) + 8 * projection",
                             ["length", "width", "projection"], "mm"),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="area", label="Opening Area", unit="mm²", order=1,
                          formula=formula("length * width", ["length", "width"], "mm²")),
            CustomFormula(name="openingPerimeter", label="Opening Perimeter", unit="mm", order=2,
                          formula=formula("2 * (length + width)", ["length", "width"], "mm")),
        ]),
    },
    allowed_material_categories=PLATE_MATERIALS,
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    # fit-up of four plates
    fabrication_cost=FabricationCost(labor_hours=4),
    is_standard=False,
    tags=["nozzle", "rectangular", "custom"],
)


# Flanged assemblies are bought against pipe and flange catalogs; their
# weights are catalog approximations and do not depend on material density.
# Volume is the carbon steel equivalent of that weight.
_CARBON_STEEL_DENSITY = "7850"


def _equivalent_volume(weight_expression: str) -> str:
    return f"({weight_expression}) * {MM3_PER_M3} / {_CARBON_STEEL_DENSITY}"


_ASSEMBLY_WEIGHT = (
    "nozzleSize * 0.5 + flangeRating * 0.01 + (projectionOutside + projectionInside) * 0.02"
)
_ASSEMBLY_VARIABLES = ["nozzleSize", "flangeRating", "projectionOutside", "projectionInside"]

NOZZLE_ASSEMBLY = ShapeDefinition(
    name="Standard Nozzle Assembly",
    description="Pipe neck with weld neck flange, sized from the pipe and flange catalogs",
    category=ShapeCategory.NOZZLE_ASSEMBLY,
    standard=ASME_VIII,
    parameters=[
        param("shellThickness", "Shell Thickness", 1, min_value=3, max_value=200),
        select_param("nozzleSize", "Nozzle Nominal Size", 2, [
            ("50", '2"', 50), ("80", '3"', 80), ("100", '4"', 100), ("150", '6"', 150),
            ("200", '8"', 200), ("250", '10"', 250), ("300", '12"', 300),
        ], default=100),
        select_param("flangeRating", "Flange Pressure Rating", 3, [
            ("150", "150#", 150), ("300", "300#", 300), ("600", "600#", 600),
            ("900", "900#", 900), ("1500", "1500#", 1500),
        ], unit="", default=150),
        param("projectionOutside", "Projection Outside Shell", 4, default=300,
              min_value=100, max_value=2000),
        param("projectionInside", "Projection Inside Shell", 5, default=0,
              min_value=0, max_value=500, required=False),
    ],
    formulas={
        "volume": formula(_equivalent_volume(_ASSEMBLY_WEIGHT), _ASSEMBLY_VARIABLES, "mm³",
                          "Carbon steel equivalent volume"),
        "weight": formula(_ASSEMBLY_WEIGHT, _ASSEMBLY_VARIABLES, "kg",
                          "Approximate assembly weight, see the pipe and flange catalogs"),
        # nozzle-to-shell and neck-to-flange welds
        "weldLength": formula("2 * pi * nozzleSize", ["nozzleSize"], "mm"),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="totalLength", label="Total Assembly Length", unit="mm", order=1,
                          formula=formula("projectionOutside + projectionInside + shellThickness",
                                          ["projectionOutside", "projectionInside", "shellThickness"],
                                          "mm")),
        ]),
    },
    allowed_material_categories=PIPE_MATERIALS[:3],
    default_material_category=MaterialCategory.PIPES_CARBON_STEEL,
    fabrication_cost=FabricationCost(welding_cost_per_meter=300),
    tags=["nozzle", "assembly", "flanged", "reinforcement"],
)

_NECK_LENGTH = "(projectionOutside + projectionInside + shellThickness)"
_NECK_VOLUME = f"pi * ((nozzleOD/2)^2 - ((nozzleOD - 2*nozzleThickness)/2)^2) * {_NECK_LENGTH}"
_NECK_VARIABLES = [
    "nozzleOD", "nozzleThickness", "projectionOutside", "projectionInside", "shellThickness",
]

CIRCULAR_NOZZLE = ShapeDefinition(
    name="Custom Circular Nozzle",
    description="Nozzle neck of any outside diameter and wall, rolled or cut from pipe",
    category=ShapeCategory.NOZZLE_CUSTOM_CIRCULAR,
    shape_type=ShapeType.CUSTOM,
    standard=ASME_VIII,
    parameters=[
        param("shellThickness", "Shell Thickness", 1, min_value=3, max_value=200),
        param("nozzleOD", "Nozzle Outer Diameter", 2, default=114.3, min_value=20, max_value=1000),
        param("nozzleThickness", "Nozzle Wall Thickness", 3, default=6, min_value=2, max_value=50),
        param("projectionOutside", "Projection Outside", 4, default=300,
              min_value=50, max_value=2000),
        param("projectionInside", "Projection Inside", 5, default=0,
              min_value=0, max_value=500, required=False),
    ],
    formulas={
        "volume": formula(_NECK_VOLUME, _NECK_VARIABLES, "mm³", "Nozzle neck volume"),
        "weight": weight_formula(_NECK_VOLUME, _NECK_VARIABLES, "Nozzle neck weight"),
        "surfaceArea": formula(
            f"pi * (2*nozzleOD - 2*nozzleThickness) * {_NECK_LENGTH}", _NECK_VARIABLES, "mm²",
            "Inside and outside",
        ),
        "weldLength": formula("2 * pi * nozzleOD", ["nozzleOD"], "mm"),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="totalLength", label="Total Length", unit="mm", order=1,
                          formula=formula(_NECK_LENGTH, _NECK_VARIABLES[2:], "mm")),
            CustomFormula(name="nozzleID", label="Nozzle Inside Diameter", unit="mm", order=2,
                          formula=formula("nozzleOD - 2*nozzleThickness",
                                          ["nozzleOD", "nozzleThickness"], "mm")),
        ]),
    },
    allowed_material_categories=PIPE_MATERIALS[:3],
    default_material_category=MaterialCategory.PIPES_CARBON_STEEL,
    fabrication_cost=FabricationCost(welding_cost_per_meter=250),
    is_standard=False,
    tags=["nozzle", "circular", "custom"],
)

_MANWAY_WEIGHT = (
    "manwayType * 50 + pressureRating * 0.1 + neckProjection * 0.05 + includeDavit * 20"
)
_MANWAY_VARIABLES = ["manwayType", "pressureRating", "neckProjection", "includeDavit"]

MANWAY_ASSEMBLY = ShapeDefinition(
    name="Manway Assembly",
    description="Personnel access manway with cover, bolting and optional davit",
    category=ShapeCategory.MANWAY_ASSEMBLY,
    parameters=[
        select_param("manwayType", "Manway Type", 1, [
            ("1", 'Circular 18"', 1), ("2", 'Circular 20"', 2),
            ("3", 'Oval 16x12"', 3), ("4", 'Rectangular 18x12"', 4),
        ], unit="", default=1),
        select_param("pressureRating", "Pressure Rating", 2, [
            ("150", "150 psi", 150), ("300", "300 psi", 300), ("600", "600 psi", 600),
        ], unit="", default=150),
        ShapeParameter(name="includeDavit", label="Include Davit Arm", unit="", order=3,
                       data_type=ParameterDataType.BOOLEAN, default_value=1, required=False),
        param("neckProjection", "Neck Projection", 4, default=300, min_value=200, max_value=800),
    ],
    formulas={
        "volume": formula(_equivalent_volume(_MANWAY_WEIGHT), _MANWAY_VARIABLES, "mm³",
                          "Carbon steel equivalent volume"),
        "weight": formula(_MANWAY_WEIGHT, _MANWAY_VARIABLES, "kg",
                          "Approximate assembly weight, see the manway catalog"),
    },
    allowed_material_categories=PLATE_MATERIALS[:2],
    default_material_category=MaterialCategory.PLATES_CARBON_STEEL,
    fabrication_cost=FabricationCost(welding_cost_per_meter=400),
    tags=["manway", "assembly", "access"],
)

NOZZLE_SHAPES = [REINFORCEMENT_PAD, RECTANGULAR_NOZZLE, NOZZLE_ASSEMBLY, CIRCULAR_NOZZLE,
                 MANWAY_ASSEMBLY]
