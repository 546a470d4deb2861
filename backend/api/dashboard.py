"""
Dashboard API - headline counts and low-stock alerts
"""
from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from backend.database import get_db
from backend.models.purchase_order import OrderStatus, PurchaseOrder
from backend.api.auth import get_current_actor
from backend.services.actors import Actor
from backend.services.intents import IntentService
from backend.services.inventory_ledger import InventoryLedger
from backend.services.orders import OrderService
from backend.utils.helpers import format_currency

router = APIRouter()


@router.get("/summary")
async def get_dashboard_summary(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor)
):
    """Everything the home screen shows in one call"""
    ledger = InventoryLedger(db)
    orders = OrderService(db, ledger=ledger)
    intents = IntentService(db)

    result = await db.execute(
        select(PurchaseOrder.status, func.count(PurchaseOrder.id)).group_by(PurchaseOrder.status)
    )
    status_counts = {status.value: 0 for status in OrderStatus}
    for status, count in result.all():
        status_counts[status.value] = count

    active = await orders.active_orders()
    active_value = sum((order.total_amount for order in active), Decimal(0))
    low_stock = await ledger.low_stock_items()

    return {
        "orders_by_status": status_counts,
        "active_orders": len(active),
        "active_order_value": float(active_value),
        "active_order_value_display": format_currency(active_value),
        "intents_awaiting_review": len(await intents.awaiting_review()),
        "unfulfilled_conversions": len(await intents.unfulfilled_conversions()),
        "low_stock_items": [
            {
                "material_id": item.material_id,
                "material_name": item.material_name,
                "quantity": float(item.quantity),
                "threshold": float(item.threshold),
                "unit": item.unit,
                "suggested_reorder_quantity": float(ledger.suggested_reorder_quantity(item)),
            }
            for item in low_stock
        ],
    }
