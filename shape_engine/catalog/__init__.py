"""
Static shape catalog. Loaded once at import; entries are frozen models and
are only ever handed out as stamped copies (see calculators.registry).
"""

import logging

from ..calculators.formula_evaluator import check_formula, extract_variables
from ..schemas import BlankDefinition, CustomFormulaSet, FormulaDefinition, ShapeDefinition
from .heads import HEAD_SHAPES
from .heat_exchangers import HEAT_EXCHANGER_SHAPES
from .nozzles import NOZZLE_SHAPES
from .plates import PLATE_SHAPES
from .pressure_vessels import PRESSURE_VESSEL_SHAPES
from .tubes import TUBE_SHAPES

logger = logging.getLogger(__name__)

SHAPE_CATALOG: tuple[ShapeDefinition, ...] = tuple(
    PLATE_SHAPES
    + TUBE_SHAPES
    + PRESSURE_VESSEL_SHAPES
    + HEAD_SHAPES
    + HEAT_EXCHANGER_SHAPES
    + NOZZLE_SHAPES
)

logger.info(f"Loaded {len(SHAPE_CATALOG)} catalog shapes")


def iter_formulas(shape: ShapeDefinition):
    """Yield (label, FormulaDefinition) for every formula in a shape, composites included."""
    for key, entry in shape.formulas.items():
        if isinstance(entry, FormulaDefinition):
            yield key, entry
        elif isinstance(entry, BlankDefinition):
            for part in ("blank_length", "blank_width", "blank_diameter", "scrap_formula"):
                sub = getattr(entry, part)
                if sub is not None:
                    yield f"{key}.{part}", sub
        elif isinstance(entry, CustomFormulaSet):
            for custom in entry.formulas:
                yield f"{key}.{custom.name}", custom.formula


def check_catalog(shapes=None) -> dict[str, list[str]]:
    """
    Authoring checks over catalog shapes. Returns {shape name: problems},
    listing only shapes that have problems.
    """
    problems = {}
    for shape in (SHAPE_CATALOG if shapes is None else shapes):
        found = []
        param_names = [p.name for p in shape.parameters]
        used = set()
        for label, definition in iter_formulas(shape):
            for problem in check_formula(definition):
                found.append(f"{label}: {problem}")
            for name in extract_variables(definition.expression):
                used.add(name)
                if name != "density" and name not in param_names:
                    found.append(f"{label}: {name!r} is not a parameter of this shape")

        for p in shape.parameters:
            if p.name not in used:
                found.append(f"Parameter {p.name!r} is not used by any formula")
            for key in p.used_in_formulas:
                if key not in shape.formulas:
                    found.append(f"Parameter {p.name!r} lists unknown formula {key!r}")

        if shape.formulas and not all(k in shape.formulas for k in ("volume", "weight")):
            found.append("Shape must define volume and weight formulas")

        if found:
            problems[shape.name] = found
    return problems
