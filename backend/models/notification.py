"""
User-facing notifications emitted by the engines
"""
from enum import Enum
from datetime import datetime

from sqlalchemy import Column, Integer, Text, DateTime, Boolean, Enum as SQLEnum
from backend.database import Base


class NotificationKind(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"
    INFO = "info"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(SQLEnum(NotificationKind, native_enum=False), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    dismissed = Column(Boolean, default=False, nullable=False)
