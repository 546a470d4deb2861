"""
Material master data (plywood, laminates, hardware, ...)
"""
from sqlalchemy import Column, Integer, String
from backend.database import Base


class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    unit = Column(String, nullable=False)  # Nos., sheets, kg, rft, ...
