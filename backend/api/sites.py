"""
Sites API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List

from backend.api.auth import get_current_actor
from backend.api.deps import get_master_data
from backend.schemas.master_data import BulkNameRecord, NamedCreate, NamedResponse
from backend.services.actors import Actor
from backend.services.master_data import MasterDataService

router = APIRouter()


@router.get("/", response_model=List[NamedResponse])
async def list_sites(
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """List all project sites"""
    return await service.list_sites()


@router.get("/{site_id}", response_model=NamedResponse)
async def get_site(
    site_id: int,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.get_site(site_id)


@router.post("/", response_model=NamedResponse)
async def create_site(
    data: NamedCreate,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.add_site(data.name, actor)


@router.post("/bulk", response_model=List[NamedResponse])
async def bulk_create_sites(
    records: List[BulkNameRecord],
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.bulk_add_sites(records, actor)


@router.put("/{site_id}", response_model=NamedResponse)
async def update_site(
    site_id: int,
    data: NamedCreate,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """Rename a site"""
    return await service.update_site(site_id, data.name, actor)


@router.delete("/{site_id}")
async def delete_site(
    site_id: int,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """Delete a site no order line or issuance mentions"""
    await service.delete_site(site_id, actor)
    return {"message": "Site deleted"}
