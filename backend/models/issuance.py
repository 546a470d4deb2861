"""
Material issuance model - stock consumed at a site
"""
from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from backend.database import Base
from backend.utils.helpers import QUANTITY_SCALE, reference_code


class MaterialIssuance(Base):
    """Immutable debit against the inventory ledger"""
    __tablename__ = "material_issuances"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_issuance_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    material_id = Column(Integer, ForeignKey("materials.id"), nullable=False, index=True)
    quantity = Column(Numeric(14, QUANTITY_SCALE), nullable=False)
    unit = Column(String, nullable=False)
    issued_to_site = Column(String, nullable=False, index=True)
    issued_by = Column(String, nullable=False)
    issued_on = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)

    material = relationship("Material", lazy="joined")

    @property
    def material_name(self):
        return self.material.name if self.material else None

    @property
    def reference(self) -> str:
        return reference_code("ISS", self.id)
