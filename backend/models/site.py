"""
Site / client model (where materials are consumed)
"""
from sqlalchemy import Column, Integer, String
from backend.database import Base


class Site(Base):
    __tablename__ = "sites"

    id = Column(Integer, primary_key=True, index=True)
    # Line items and issuances refer to sites by name, not by id
    name = Column(String, unique=True, nullable=False, index=True)
