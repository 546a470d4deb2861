"""
Notification sinks and the notification center service
"""
from typing import List, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.models.notification import Notification, NotificationKind
from backend.services.errors import NotFoundError
from backend.utils.logger import get_logger

logger = get_logger(__name__)


class NotificationSink(Protocol):
    def notify(self, kind: NotificationKind, message: str) -> None:
        ...


class LoggingNotificationSink:
    """Writes notifications to the log only"""

    def __init__(self):
        self.sent: List[tuple] = []

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.sent.append((kind, message))
        logger.info(f"[{kind.value}] {message}")


class DatabaseNotificationSink:
    """
    Stores notifications in the caller's session.

    The row is flushed with whatever transaction emitted it, so a rolled-back
    operation never leaves a success message behind.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    def notify(self, kind: NotificationKind, message: str) -> None:
        self.db.add(Notification(kind=kind, message=message))


class NotificationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_active(self, limit: int = 50) -> List[Notification]:
        result = await self.db.execute(
            select(Notification)
            .where(Notification.dismissed == False)  # noqa: E712
            .order_by(Notification.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def dismiss(self, notification_id: int) -> Notification:
        notification = await self.db.get(Notification, notification_id)
        if not notification:
            raise NotFoundError("Notification", notification_id)
        notification.dismissed = True
        await self.db.commit()
        return notification
