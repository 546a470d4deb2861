"""
Purchase intent models - requests for material raised before a priced PO exists
"""
from enum import Enum

from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from backend.database import Base
from backend.utils.helpers import QUANTITY_SCALE, reference_code


class IntentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CONVERTED = "converted"


class PurchaseIntent(Base):
    __tablename__ = "purchase_intents"

    id = Column(Integer, primary_key=True, index=True)
    notes = Column(Text, nullable=True)

    requested_by = Column(String, nullable=False)
    requested_on = Column(Date, nullable=False)
    status = Column(SQLEnum(IntentStatus, native_enum=False), nullable=False, default=IntentStatus.PENDING, index=True)

    # Review
    reviewed_by = Column(String, nullable=True)
    reviewed_on = Column(Date, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Relationships
    line_items = relationship(
        "PurchaseIntentLineItem",
        back_populates="intent",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="PurchaseIntentLineItem.id",
    )

    @property
    def reference(self) -> str:
        return reference_code("PI", self.id)


class PurchaseIntentLineItem(Base):
    """Quantity and unit only - intents express need, not cost"""
    __tablename__ = "purchase_intent_line_items"

    id = Column(Integer, primary_key=True, index=True)
    intent_id = Column(Integer, ForeignKey("purchase_intents.id", ondelete="CASCADE"), nullable=False, index=True)
    material_id = Column(Integer, ForeignKey("materials.id"), nullable=False, index=True)

    quantity = Column(Numeric(14, QUANTITY_SCALE), nullable=False)
    unit = Column(String, nullable=False)
    site = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    intent = relationship("PurchaseIntent", back_populates="line_items")
    material = relationship("Material", lazy="joined")

    @property
    def material_name(self):
        return self.material.name if self.material else None
