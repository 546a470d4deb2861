"""
Purchase intent schemas
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel

from backend.models.purchase_intent import IntentStatus
from backend.schemas.common import Amount


class IntentLineInput(BaseModel):
    material_id: Optional[int] = None
    quantity: Optional[Amount] = None
    unit: Optional[str] = None
    site: Optional[str] = None
    notes: Optional[str] = None


class IntentCreate(BaseModel):
    line_items: List[IntentLineInput]
    notes: Optional[str] = None


class IntentLineResponse(BaseModel):
    id: int
    material_id: int
    material_name: Optional[str] = None
    quantity: float
    unit: str
    site: Optional[str]
    notes: Optional[str]

    class Config:
        from_attributes = True


class IntentResponse(BaseModel):
    id: int
    reference: str
    notes: Optional[str]
    requested_by: str
    requested_on: date
    status: IntentStatus
    reviewed_by: Optional[str]
    reviewed_on: Optional[date]
    rejection_reason: Optional[str]
    line_items: List[IntentLineResponse]

    class Config:
        from_attributes = True
