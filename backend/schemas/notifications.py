"""
Notification schemas
"""
from datetime import datetime
from pydantic import BaseModel

from backend.models.notification import NotificationKind


class NotificationResponse(BaseModel):
    id: int
    kind: NotificationKind
    message: str
    created_at: datetime
    dismissed: bool

    class Config:
        from_attributes = True
