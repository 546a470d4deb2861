"""
Vendors API endpoints
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
async def list_vendors(
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """List all vendors"""
    return await service.list_vendors()


@router.get("/{vendor_id}", response_model=NamedResponse)
async def get_vendor(
    vendor_id: int,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.get_vendor(vendor_id)


@router.post("/", response_model=NamedResponse)
async def create_vendor(
    data: NamedCreate,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.add_vendor(data.name, actor)


@router.post("/bulk", response_model=List[NamedResponse])
async def bulk_create_vendors(
    records: List[BulkNameRecord],
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    return await service.bulk_add_vendors(records, actor)


@router.put("/{vendor_id}", response_model=NamedResponse)
async def update_vendor(
    vendor_id: int,
    data: NamedCreate,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """Rename a vendor"""
    return await service.update_vendor(vendor_id, data.name, actor)


@router.delete("/{vendor_id}")
async def delete_vendor(
    vendor_id: int,
    service: MasterDataService = Depends(get_master_data),
    actor: Actor = Depends(get_current_actor)
):
    """Delete a vendor with no purchase orders"""
    await service.delete_vendor(vendor_id, actor)
    return {"message": "Vendor deleted"}
