from typing import List

from fastapi import APIRouter, HTTPException

from ..catalog.materials import get_material, list_materials
from ..schemas import Material

router = APIRouter(prefix="/materials", tags=["materials"])


@router.get("/", response_model=List[Material])
def list_default_materials():
    return list_materials()


@router.get("/{material_id}", response_model=Material)
def get_default_material(material_id: str):
    try:
        return get_material(material_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Material not found: {material_id}")
