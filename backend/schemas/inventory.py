"""
Inventory ledger schemas
"""
from typing import List, Optional
from pydantic import BaseModel

from backend.schemas.common import Amount


class InventoryItemResponse(BaseModel):
    material_id: int
    material_name: Optional[str] = None
    quantity: float
    threshold: float
    unit: str
    is_low_stock: bool

    class Config:
        from_attributes = True


class InventoryItemUpdate(BaseModel):
    threshold: Optional[Amount] = None
    unit: Optional[str] = None


class OpeningStockUpdate(BaseModel):
    """Absolute quantity for a material that already exists"""
    material_id: int
    quantity: Amount
    unit: Optional[str] = None


class OpeningStockNewItem(BaseModel):
    """Brand-new material created together with its opening stock"""
    name: str
    unit: str
    quantity: Amount
    threshold: Optional[Amount] = None


class OpeningStockRequest(BaseModel):
    updates: List[OpeningStockUpdate] = []
    new_items: List[OpeningStockNewItem] = []


class BulkStockRecord(BaseModel):
    name: str
    unit: str
    quantity: Amount
    threshold: Optional[Amount] = None
