"""
Purchase order schemas, including the OrderDraft hand-off value
"""
from datetime import date
from typing import List, Optional
from pydantic import BaseModel

from backend.models.purchase_order import OrderPriority, OrderStatus
from backend.schemas.common import Amount


class OrderLineInput(BaseModel):
    # Required fields are Optional here so the engine can report them as
    # validation errors instead of the request failing schema parsing
    material_id: Optional[int] = None
    quantity: Optional[Amount] = None
    unit: Optional[str] = None
    specifications: str = ""
    size: Optional[str] = None
    brand: Optional[str] = None
    site: Optional[str] = None
    rate: Optional[Amount] = None
    discount: Optional[Amount] = None
    gst: Optional[Amount] = None  # 18 when not given
    freight: Optional[Amount] = None


class OrderCreate(BaseModel):
    vendor_id: int
    line_items: List[OrderLineInput]
    priority: OrderPriority = OrderPriority.MEDIUM
    expected_delivery: Optional[date] = None
    notes: Optional[str] = None
    auto_generated: bool = False
    intent_id: Optional[int] = None


class OrderUpdate(BaseModel):
    """Full replacement of the editable fields; line items replace the old set"""
    vendor_id: int
    line_items: List[OrderLineInput]
    priority: OrderPriority = OrderPriority.MEDIUM
    expected_delivery: Optional[date] = None
    notes: Optional[str] = None


class OrderDraft(BaseModel):
    """
    Pre-filled order that has not been saved.

    Produced by intent conversion and low-stock suggestions; the user picks a
    vendor and pricing, then submits it through create_order.
    """
    line_items: List[OrderLineInput]
    notes: str = ""
    priority: OrderPriority = OrderPriority.MEDIUM
    intent_id: Optional[int] = None
    auto_generated: bool = False

    def to_order_create(self, vendor_id: int, expected_delivery: Optional[date] = None) -> OrderCreate:
        return OrderCreate(
            vendor_id=vendor_id,
            line_items=[item.model_copy() for item in self.line_items],
            priority=self.priority,
            expected_delivery=expected_delivery,
            notes=self.notes,
            auto_generated=self.auto_generated,
            intent_id=self.intent_id,
        )


class RejectRequest(BaseModel):
    reason: str


class OrderLineResponse(BaseModel):
    id: int
    material_id: int
    material_name: Optional[str] = None
    quantity: float
    unit: str
    specifications: str
    size: Optional[str]
    brand: Optional[str]
    site: Optional[str]
    rate: float
    discount: Optional[float]
    gst: float
    freight: Optional[float]
    line_total: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    reference: str
    vendor_id: int
    vendor_name: Optional[str] = None
    notes: Optional[str]
    priority: OrderPriority
    status: OrderStatus
    ordered_on: date
    expected_delivery: Optional[date]
    delivered_on: Optional[date]
    raised_by: str
    auto_generated: bool
    approved_by: Optional[str]
    approved_on: Optional[date]
    rejected_by: Optional[str]
    rejected_on: Optional[date]
    rejection_reason: Optional[str]
    cancelled_by: Optional[str]
    cancelled_on: Optional[date]
    received_by: Optional[str]
    intent_id: Optional[int]
    is_rejected: bool
    total_amount: float
    line_items: List[OrderLineResponse]

    class Config:
        from_attributes = True
