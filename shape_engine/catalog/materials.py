"""
Default material master data. Densities in kg/m³, prices in INR per kg.
"""

from ..models import MaterialCategory
from ..schemas import Material, MaterialPrice


def _material(material_id, name, category, density, price):
    return Material(
        id=material_id,
        name=name,
        category=category,
        density=density,
        current_price=MaterialPrice(amount=price, currency="INR"),
    )


DEFAULT_MATERIALS = [
    _material("cs-is2062-e250", "Carbon Steel Plate IS 2062 E250",
              MaterialCategory.PLATES_CARBON_STEEL, 7850, 65),
    _material("ss304", "Stainless Steel 304 Plate",
              MaterialCategory.PLATES_STAINLESS_STEEL, 7930, 250),
    _material("ss316l", "Stainless Steel 316L Plate",
              MaterialCategory.PLATES_STAINLESS_STEEL, 8000, 320),
    _material("duplex-2205", "Duplex Stainless Steel 2205 Plate",
              MaterialCategory.PLATES_DUPLEX_STEEL, 7800, 550),
    _material("sa387-gr11", "Alloy Steel Plate SA 387 Gr 11",
              MaterialCategory.PLATES_ALLOY_STEEL, 7860, 140),
    _material("cs-sa106-b", "Carbon Steel Pipe SA 106 Gr B",
              MaterialCategory.PIPES_CARBON_STEEL, 7850, 90),
]


def list_materials() -> list[Material]:
    return list(DEFAULT_MATERIALS)


def get_material(material_id: str) -> Material:
    """Raises KeyError for an unknown id."""
    for material in DEFAULT_MATERIALS:
        if material.id == material_id:
            return material
    raise KeyError(material_id)
