from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_current_active_user, get_db, get_service
from fitcoach.models.user import User
from fitcoach.schemas.notification import MarkAllReadResponse, NotificationResponse
from fitcoach.services.notification import NotificationService

router = APIRouter()


@router.get("/", response_model=List[NotificationResponse])
async def list_notifications(
    unread_only: bool = Query(False),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_service("NotificationService")),
):
    """The current user's notifications, newest first."""
    return notifications.list_notifications(db=db, user_id=current_user.id, unread_only=unread_only)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_as_read(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_service("NotificationService")),
):
    updated = notifications.mark_all_as_read(db=db, user_id=current_user.id)
    return MarkAllReadResponse(updated=updated)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_as_read(
    notification_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_service("NotificationService")),
):
    return notifications.mark_as_read(db=db, user_id=current_user.id, notification_id=notification_id)
