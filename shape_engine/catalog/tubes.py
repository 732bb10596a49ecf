from ..models import MaterialCategory, PIPE_MATERIALS, ShapeCategory
from ..schemas import CustomFormula, CustomFormulaSet, ShapeDefinition
from .base import formula, param, weight_formula

_TUBE_VOLUME = "pi * ((OD/2)^2 - (OD/2 - t)^2) * L"

STRAIGHT_TUBE = ShapeDefinition(
    name="Straight Tube",
    description="Straight length of pipe or tube cut to size",
    category=ShapeCategory.TUBE_STRAIGHT,
    parameters=[
        param("OD", "Outside Diameter", 1, min_value=6, max_value=2500),
        param("t", "Wall Thickness", 2, min_value=0.5, max_value=100),
        param("L", "Length", 3, min_value=1, max_value=12000),
    ],
    formulas={
        "volume": formula(_TUBE_VOLUME, ["OD", "t", "L"], "mm³", "Wall volume",
                          expected_range=(0, 1e12)),
        "weight": weight_formula(_TUBE_VOLUME, ["OD", "t", "L"], "Tube weight"),
        "outerSurfaceArea": formula("pi * OD * L", ["OD", "L"], "mm²"),
        "innerSurfaceArea": formula("pi * (OD - 2*t) * L", ["OD", "t", "L"], "mm²"),
        "surfaceArea": formula("pi * OD * L + pi * (OD - 2*t) * L", ["OD", "t", "L"], "mm²"),
        "wettedArea": formula("pi * (OD - 2*t) * L", ["OD", "t", "L"], "mm²"),
        # both ends are cut and bevelled
        "edgeLength": formula("2 * pi * OD", ["OD"], "mm"),
        "perimeter": formula("2 * pi * OD", ["OD"], "mm"),
        "customFormulas": CustomFormulaSet(formulas=[
            CustomFormula(name="ID", label="Inside Diameter", unit="mm", order=1,
                          formula=formula("OD - 2*t", ["OD", "t"], "mm")),
            CustomFormula(name="weightPerMeter", label="Weight per Metre", unit="kg/m", order=2,
                          formula=weight_formula("pi * ((OD/2)^2 - (OD/2 - t)^2) * 1000", ["OD", "t"])),
            CustomFormula(name="flowArea", label="Flow Area", unit="mm²", order=3,
                          formula=formula("pi * (OD/2 - t)^2", ["OD", "t"], "mm²")),
        ]),
    },
    allowed_material_categories=PIPE_MATERIALS,
    default_material_category=MaterialCategory.PIPES_CARBON_STEEL,
    tags=["tube", "pipe"],
)

TUBE_SHAPES = [STRAIGHT_TUBE]
