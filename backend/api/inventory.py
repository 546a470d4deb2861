"""
Inventory API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List

from backend.api.auth import get_current_actor
from backend.api.deps import get_ledger
from backend.schemas.inventory import (
    BulkStockRecord,
    InventoryItemResponse,
    InventoryItemUpdate,
    OpeningStockRequest,
)
from backend.services.actors import Actor
from backend.services.inventory_ledger import InventoryLedger

router = APIRouter()


@router.get("/", response_model=List[InventoryItemResponse])
async def list_inventory(
    ledger: InventoryLedger = Depends(get_ledger),
    actor: Actor = Depends(get_current_actor)
):
    """Stock on hand for every stocked material"""
    return await ledger.list_items()


@router.get("/low-stock", response_model=List[InventoryItemResponse])
async def list_low_stock(
    ledger: InventoryLedger = Depends(get_ledger),
    actor: Actor = Depends(get_current_actor)
):
    """Items at or below their reorder threshold"""
    return await ledger.low_stock_items()


@router.get("/{material_id}", response_model=InventoryItemResponse)
async def get_inventory_item(
    material_id: int,
    ledger: InventoryLedger = Depends(get_ledger),
    actor: Actor = Depends(get_current_actor)
):
    return await ledger.get_item(material_id)


@router.post("/opening-stock", response_model=List[InventoryItemResponse])
async def set_opening_stock(
    data: OpeningStockRequest,
    ledger: InventoryLedger = Depends(get_ledger),
    actor: Actor = Depends(get_current_actor)
):
    """Set absolute stock levels and create new materials in one batch"""
    return await ledger.set_opening_stock(data.updates, data.new_items, actor)


@router.post("/bulk", response_model=List[InventoryItemResponse])
async def upload_stock(
    records: List[BulkStockRecord],
    ledger: InventoryLedger = Depends(get_ledger),
    actor: Actor = Depends(get_current_actor)
):
    """Apply parsed stock-sheet rows"""
    return await ledger.add_bulk_stock(records, actor)


@router.put("/{material_id}", response_model=InventoryItemResponse)
async def update_inventory_item(
    material_id: int,
    data: InventoryItemUpdate,
    ledger: InventoryLedger = Depends(get_ledger),
    actor: Actor = Depends(get_current_actor)
):
    """Change the reorder threshold or unit of an item"""
    return await ledger.update_item(material_id, data, actor)
