"""
Material issuance API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from backend.api.auth import get_current_actor
from backend.api.deps import get_issuance_service
from backend.schemas.issuance import IssuanceBatch, IssuanceCreate, IssuanceResponse
from backend.services.actors import Actor
from backend.services.issuance import IssuanceService

router = APIRouter()


@router.get("/", response_model=List[IssuanceResponse])
async def list_issuances(
    material_id: Optional[int] = None,
    site: Optional[str] = None,
    service: IssuanceService = Depends(get_issuance_service),
    actor: Actor = Depends(get_current_actor)
):
    """Issuance history, newest first"""
    return await service.list_issuances(material_id=material_id, site=site)


@router.post("/", response_model=IssuanceResponse)
async def issue_material(
    data: IssuanceCreate,
    service: IssuanceService = Depends(get_issuance_service),
    actor: Actor = Depends(get_current_actor)
):
    """Hand out stock to a site"""
    return await service.issue_material(data, actor)


@router.post("/batch", response_model=List[IssuanceResponse])
async def issue_materials(
    data: IssuanceBatch,
    service: IssuanceService = Depends(get_issuance_service),
    actor: Actor = Depends(get_current_actor)
):
    """Issue several materials at once; all lines or none"""
    return await service.issue_materials(data.items, actor)
