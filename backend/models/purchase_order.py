"""
Purchase order models
"""
from decimal import Decimal
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, Boolean, Enum as SQLEnum
from sqlalchemy.orm import relationship
from backend.database import Base
from backend.utils.helpers import MONEY_SCALE, QUANTITY_SCALE, line_total, reference_code


class OrderStatus(str, Enum):
    AWAITING_APPROVAL = "awaiting_approval"
    PENDING = "pending"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


TERMINAL_ORDER_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class PurchaseOrder(Base):
    """Committed request to a vendor at agreed pricing"""
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)

    notes = Column(Text, nullable=True)
    priority = Column(SQLEnum(OrderPriority, native_enum=False), nullable=False, default=OrderPriority.MEDIUM)
    status = Column(SQLEnum(OrderStatus, native_enum=False), nullable=False, index=True)

    # Dates
    ordered_on = Column(Date, nullable=False)
    expected_delivery = Column(Date, nullable=True)
    delivered_on = Column(Date, nullable=True)

    # People
    raised_by = Column(String, nullable=False)
    auto_generated = Column(Boolean, default=False, nullable=False)  # created from a low-stock suggestion
    approved_by = Column(String, nullable=True)
    approved_on = Column(Date, nullable=True)
    rejected_by = Column(String, nullable=True)
    rejected_on = Column(Date, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    cancelled_by = Column(String, nullable=True)
    cancelled_on = Column(Date, nullable=True)
    received_by = Column(String, nullable=True)

    # Source intent, when converted from one
    intent_id = Column(Integer, ForeignKey("purchase_intents.id"), nullable=True, unique=True)

    # Relationships
    vendor = relationship("Vendor", lazy="joined")
    line_items = relationship(
        "OrderLineItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderLineItem.id",
    )

    @property
    def reference(self) -> str:
        return reference_code("PO", self.id)

    @property
    def vendor_name(self):
        return self.vendor.name if self.vendor else None

    @property
    def total_amount(self) -> Decimal:
        return sum((item.line_total for item in self.line_items), Decimal(0))

    @property
    def is_rejected(self) -> bool:
        """Cancelled by a manager's rejection rather than by the raiser"""
        return self.status == OrderStatus.CANCELLED and self.rejected_by is not None


class OrderLineItem(Base):
    """One material entry in a purchase order"""
    __tablename__ = "order_line_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("materials.id"), nullable=False, index=True)

    # Item details
    quantity = Column(Numeric(14, QUANTITY_SCALE), nullable=False)
    unit = Column(String, nullable=False)
    specifications = Column(Text, nullable=False, default="")
    size = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    site = Column(String, nullable=True)  # site name, free text

    # Pricing
    rate = Column(Numeric(12, MONEY_SCALE), nullable=False)
    discount = Column(Numeric(5, MONEY_SCALE), nullable=True)  # percent
    gst = Column(Numeric(5, MONEY_SCALE), nullable=False, default=18)  # percent
    freight = Column(Numeric(12, MONEY_SCALE), nullable=True)  # flat amount

    # Relationships
    order = relationship("PurchaseOrder", back_populates="line_items")
    material = relationship("Material", lazy="joined")

    @property
    def material_name(self):
        return self.material.name if self.material else None

    @property
    def line_total(self) -> Decimal:
        return line_total(self.quantity, self.rate, self.discount, self.gst, self.freight)
