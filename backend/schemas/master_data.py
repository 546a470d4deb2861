"""
Master data request/response schemas
"""
from typing import Optional
from pydantic import BaseModel


class MaterialCreate(BaseModel):
    name: str
    unit: str


class MaterialUpdate(BaseModel):
    name: Optional[str] = None
    unit: Optional[str] = None


class MaterialResponse(BaseModel):
    id: int
    name: str
    unit: str

    class Config:
        from_attributes = True


class NamedCreate(BaseModel):
    """Vendors and sites carry only a name"""
    name: str


class NamedResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class BulkMaterialRecord(BaseModel):
    name: str
    unit: Optional[str] = None


class BulkNameRecord(BaseModel):
    name: str
