"""
Shape registry: category-group lookups over the static catalog.

Catalog entries carry no identity of their own. Every lookup returns copies
stamped with a slug id and a positional shape code; the catalog itself is
never touched.
"""

import re

from ..catalog import SHAPE_CATALOG
from ..models import ShapeCategory
from ..schemas import ShapeDefinition

CATEGORY_GROUPS: dict[str, list[ShapeCategory]] = {
    "plates": [
        ShapeCategory.PLATE_RECTANGULAR,
        ShapeCategory.PLATE_CIRCULAR,
        ShapeCategory.PLATE_CUSTOM,
    ],
    "tubes": [
        ShapeCategory.TUBE_STRAIGHT,
    ],
    "shells": [
        ShapeCategory.SHELL_CYLINDRICAL,
        ShapeCategory.SHELL_CONICAL,
    ],
    "heads": [
        ShapeCategory.HEAD_HEMISPHERICAL,
        ShapeCategory.HEAD_ELLIPSOIDAL,
        ShapeCategory.HEAD_TORISPHERICAL,
        ShapeCategory.HEAD_FLAT,
        ShapeCategory.HEAD_CONICAL,
    ],
    "heat_exchanger": [
        ShapeCategory.HX_TUBE_BUNDLE,
        ShapeCategory.HX_TUBE_SHEET,
        ShapeCategory.HX_BAFFLE,
        ShapeCategory.HX_TUBE_SUPPORT,
    ],
    "nozzles": [
        ShapeCategory.NOZZLE_ASSEMBLY,
        ShapeCategory.NOZZLE_CUSTOM_CIRCULAR,
        ShapeCategory.NOZZLE_CUSTOM_RECTANGULAR,
        ShapeCategory.MANWAY_ASSEMBLY,
        ShapeCategory.REINFORCEMENT_PAD,
    ],
}


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def _stamp(position: int, shape: ShapeDefinition) -> ShapeDefinition:
    return shape.model_copy(update={
        "id": slugify(shape.name),
        "shape_code": f"SHP-{position:04d}",
    })


def _stamped_catalog() -> list[ShapeDefinition]:
    return [_stamp(i, shape) for i, shape in enumerate(SHAPE_CATALOG, start=1)]


def group_for_category(category: ShapeCategory):
    """Name of the group a category belongs to, or None for ungrouped (custom) categories."""
    for group, categories in CATEGORY_GROUPS.items():
        if category in categories:
            return group
    return None


def get_shapes_by_category(group: str) -> list[ShapeDefinition]:
    """Shapes in a category group, or raises ValueError for an unknown group."""
    if group not in CATEGORY_GROUPS:
        raise ValueError(
            f"Unknown shape category group: {group}. "
            f"Available: {list(CATEGORY_GROUPS.keys())}"
        )
    categories = CATEGORY_GROUPS[group]
    return [shape for shape in _stamped_catalog() if shape.category in categories]


def list_shape_groups() -> list[str]:
    return list(CATEGORY_GROUPS.keys())


def list_shapes() -> list[ShapeDefinition]:
    """Every catalog shape, stamped."""
    return _stamped_catalog()


def get_shape(shape_id: str) -> ShapeDefinition:
    """Look up a shape by slug id or shape code. Raises KeyError if unknown."""
    for shape in _stamped_catalog():
        if shape_id in (shape.id, shape.shape_code):
            return shape
    raise KeyError(shape_id)
