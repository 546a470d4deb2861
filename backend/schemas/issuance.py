"""
Material issuance schemas
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel

from backend.schemas.common import Amount


class IssuanceCreate(BaseModel):
    material_id: int
    quantity: Amount
    unit: Optional[str] = None  # defaults to the material's unit
    issued_to_site: str
    notes: Optional[str] = None


class IssuanceBatch(BaseModel):
    items: List[IssuanceCreate]


class IssuanceResponse(BaseModel):
    id: int
    reference: str
    material_id: int
    material_name: Optional[str] = None
    quantity: float
    unit: str
    issued_to_site: str
    issued_by: str
    issued_on: date
    notes: Optional[str]

    class Config:
        from_attributes = True
