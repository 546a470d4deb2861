"""
Materials API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List

from backend.api.auth import get_current_actor
from backend.api.deps import get_master_data
from backend.schemas.master_data import BulkMaterialRecord, MaterialCreate, MaterialResponse, MaterialUpdate
from backend.services.actors import Actor
from backend.services.master_data import MasterDataService

router = APIRouter()


@router.get("/", response_model=List[MaterialResponse])
async def list_materials(
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """List all materials by name"""
    return await service.list_materials()


@router.get("/{material_id}", response_model=MaterialResponse)
async def get_material(
    material_id: int,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.get_material(material_id)


@router.post("/", response_model=MaterialResponse)
async def create_material(
    data: MaterialCreate,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """Add a material to the catalog"""
    return await service.add_material(data, actor)


@router.post("/bulk", response_model=List[MaterialResponse])
async def bulk_create_materials(
    records: List[BulkMaterialRecord],
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """Import materials, skipping names already in the catalog"""
    return await service.bulk_add_materials(records, actor)


@router.put("/{material_id}", response_model=MaterialResponse)
async def update_material(
    material_id: int,
    data: MaterialUpdate,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.update_material(material_id, data, actor)


@router.delete("/{material_id}")
async def delete_material(
    material_id: int,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """Delete a material that no order, intent or issuance references"""
    await service.delete_material(material_id, actor)
    return {"message": "Material deleted"}
