"""
Purchase intents API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from backend.api.auth import get_current_actor
from backend.api.deps import get_intent_service
from backend.models.purchase_intent import IntentStatus
from backend.schemas.intents import IntentCreate, IntentResponse
from backend.schemas.orders import OrderDraft, RejectRequest
from backend.services.actors import Actor
from backend.services.intents import IntentService

router = APIRouter()


@router.get("/", response_model=List[IntentResponse])
async def list_intents(
    status: Optional[IntentStatus] = None,
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.list_intents(status)


@router.get("/awaiting-review", response_model=List[IntentResponse])
async def list_awaiting_review(
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.awaiting_review()


@router.get("/unfulfilled", response_model=List[IntentResponse])
async def list_unfulfilled_conversions(
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    """Converted intents whose order draft was never submitted"""
    return await service.unfulfilled_conversions()


@router.get("/{intent_id}", response_model=IntentResponse)
async def get_intent(
    intent_id: int,
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.get_intent(intent_id)


@router.post("/", response_model=IntentResponse)
async def raise_intent(
    data: IntentCreate,
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    """Request materials ahead of a priced order"""
    return await service.raise_intent(data, actor)


@router.post("/{intent_id}/approve", response_model=IntentResponse)
async def approve_intent(
    intent_id: int,
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.approve_intent(intent_id, actor)


@router.post("/{intent_id}/reject", response_model=IntentResponse)
async def reject_intent(
    intent_id: int,
    data: RejectRequest,
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.reject_intent(intent_id, data.reason, actor)


@router.post("/{intent_id}/convert", response_model=OrderDraft)
async def convert_intent(
    intent_id: int,
    service: IntentService = Depends(get_intent_service),
    actor: Actor = Depends(get_current_actor)
):
    """Mark an approved intent converted and return the order draft to complete"""
    return await service.convert_to_order_draft(intent_id, actor)
