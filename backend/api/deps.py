"""
Per-request service factories
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.database import get_db
from backend.services.intents import IntentService
from backend.services.inventory_ledger import InventoryLedger
from backend.services.issuance import IssuanceService
from backend.services.master_data import MasterDataService
from backend.services.notifications import NotificationService
from backend.services.orders import OrderService


def get_master_data(db: AsyncSession = Depends(get_db)) -> MasterDataService:
    return MasterDataService(db)


def get_ledger(db: AsyncSession = Depends(get_db)) -> InventoryLedger:
    return InventoryLedger(db)


def get_order_service(db: AsyncSession = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_intent_service(db: AsyncSession = Depends(get_db)) -> IntentService:
    return IntentService(db)


def get_issuance_service(db: AsyncSession = Depends(get_db)) -> IssuanceService:
    return IssuanceService(db)


def get_notification_service(db: AsyncSession = Depends(get_db)) -> NotificationService:
    return NotificationService(db)
