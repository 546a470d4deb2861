"""
Inventory ledger model - one stock record per material
"""
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship
from backend.database import Base
from backend.utils.helpers import QUANTITY_SCALE


class InventoryItem(Base):
    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_non_negative"),
    )

    material_id = Column(Integer, ForeignKey("materials.id", ondelete="CASCADE"), primary_key=True)
    quantity = Column(Numeric(14, QUANTITY_SCALE), nullable=False, default=0)
    threshold = Column(Numeric(14, QUANTITY_SCALE), nullable=False, default=10)  # reorder point
    unit = Column(String, nullable=False)

    material = relationship("Material", lazy="joined")

    @property
    def material_name(self):
        return self.material.name if self.material else None

    @hybrid_property
    def is_low_stock(self):
        # Usable on instances and in queries: select(InventoryItem).where(InventoryItem.is_low_stock)
        return self.quantity <= self.threshold
