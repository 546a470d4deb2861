"""
Shared plumbing for the engines: injected session, notification sink,
role checks and the all-or-nothing transaction wrapper.
"""
from contextlib import asynccontextmanager
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from backend.models.notification import NotificationKind
from backend.services.actors import Actor
from backend.services.errors import PermissionDenied, PersistenceFailure, ProcurementError
from backend.services.notifications import DatabaseNotificationSink, NotificationSink
from backend.utils.logger import get_logger


class BaseService:
    logger = get_logger(__name__)

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationSink] = None):
        self.db = db
        self.notifier = notifier if notifier is not None else DatabaseNotificationSink(db)

    @asynccontextmanager
    async def _transaction(self, operation: str):
        """
        Commit everything done inside the block, or nothing.

        Engine errors are re-raised unchanged; store errors become
        PersistenceFailure with the SQLAlchemy error chained.
        """
        try:
            yield
            await self.db.commit()
        except ProcurementError as exc:
            await self.db.rollback()
            self.logger.warning(f"{operation} rejected: {exc.message}")
            raise
        except SQLAlchemyError as exc:
            await self.db.rollback()
            self.logger.error(f"{operation} failed in the store: {exc}")
            raise PersistenceFailure(f"{operation} could not be saved; no changes were applied") from exc

    def _require_role(self, actor: Actor, allowed: Iterable, action: str) -> None:
        """Call inside _transaction so refusals are logged like any other rejection"""
        if actor.role not in allowed:
            raise PermissionDenied(f"Role '{actor.role.value}' may not {action}")

    def _notify(self, kind: NotificationKind, message: str) -> None:
        self.notifier.notify(kind, message)
