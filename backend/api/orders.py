"""
Purchase orders API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from backend.api.auth import get_current_actor
from backend.api.deps import get_order_service
from backend.models.purchase_order import OrderStatus
from backend.schemas.orders import OrderCreate, OrderDraft, OrderResponse, OrderUpdate, RejectRequest
from backend.services.actors import Actor
from backend.services.orders import OrderService

router = APIRouter()


@router.get("/", response_model=List[OrderResponse])
async def list_orders(
    status: Optional[OrderStatus] = None,
    vendor_id: Optional[int] = None,
    raised_by: Optional[str] = None,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    """List purchase orders, newest first"""
    return await service.list_orders(status=status, vendor_id=vendor_id, raised_by=raised_by)


@router.get("/active", response_model=List[OrderResponse])
async def list_active_orders(
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    """Orders awaiting approval or delivery"""
    return await service.active_orders()


@router.get("/history", response_model=List[OrderResponse])
async def list_order_history(
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    """Delivered and cancelled orders"""
    return await service.order_history()


@router.get("/low-stock-draft/{material_id}", response_model=OrderDraft)
async def low_stock_draft(
    material_id: int,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    """Pre-filled order for a material below its threshold"""
    return await service.draft_for_low_stock(material_id)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.get_order(order_id)


@router.post("/", response_model=OrderResponse)
async def create_order(
    data: OrderCreate,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    """Raise a purchase order; purchasers' orders wait for manager approval"""
    return await service.create_order(data, actor)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    data: OrderUpdate,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.update_order(order_id, data, actor)


@router.post("/{order_id}/approve", response_model=OrderResponse)
async def approve_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.approve_order(order_id, actor)


@router.post("/{order_id}/reject", response_model=OrderResponse)
async def reject_order(
    order_id: int,
    data: RejectRequest,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.reject_order(order_id, data.reason, actor)


@router.post("/{order_id}/deliver", response_model=OrderResponse)
async def mark_delivered(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    """Receive a pending order and add its lines to stock"""
    return await service.mark_delivered(order_id, actor)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: int,
    service: OrderService = Depends(get_order_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.cancel_order(order_id, actor)
