from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fitcoach.models.notification import Notification
from fitcoach.services.base import transaction


class NotificationService:
    @staticmethod
    def list_notifications(db: Session, user_id: str, unread_only: bool = False) -> List[Notification]:
        query = db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read == False)
        return query.order_by(Notification.created_at.desc()).all()

    @staticmethod
    def create_notification(
        db: Session, user_id: str, title: str, message: str, type: str = "system"
    ) -> Notification:
        notification = Notification(user_id=user_id, title=title, message=message, type=type)
        with transaction(db, "creating notification"):
            db.add(notification)
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_as_read(db: Session, user_id: str, notification_id: str) -> Notification:
        notification = (
            db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )
        if not notification:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Notification not found",
            )
        with transaction(db, "marking notification as read"):
            notification.read = True
        db.refresh(notification)
        return notification

    @staticmethod
    def mark_all_as_read(db: Session, user_id: str) -> int:
        with transaction(db, "marking notifications as read"):
            updated = (
                db.query(Notification)
                .filter(Notification.user_id == user_id, Notification.read == False)
                .update({"read": True}, synchronize_session=False)
            )
        return updated
