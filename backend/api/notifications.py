"""
Notification center API endpoints
"""
from fastapi import APIRouter, Depends
from typing import List

from backend.api.auth import get_current_actor
from backend.api.deps import get_notification_service
from backend.schemas.notifications import NotificationResponse
from backend.services.actors import Actor
from backend.services.notifications import NotificationService

router = APIRouter()


@router.get("/", response_model=List[NotificationResponse])
async def list_notifications(
    limit: int = 50,
    service: NotificationService = Depends(get_notification_service),
    actor: Actor = Depends(get_current_actor)
):
    """Undismissed notifications, newest first"""
    return await service.list_active(limit)


@router.post("/{notification_id}/dismiss", response_model=NotificationResponse)
async def dismiss_notification(
    notification_id: int,
    service: NotificationService = Depends(get_notification_service),
    actor: Actor = Depends(get_current_actor)
):
    return await service.dismiss(notification_id)
