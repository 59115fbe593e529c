"""Admin reporting service.

Platform-wide statistics, recent payments, an activity feed and the
system settings table. Amounts are integer cents.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from fitcoach.db.base_class import utcnow
from fitcoach.db.session import check_database_health
from fitcoach.models.notification import SystemSetting
from fitcoach.models.payment import PaymentIntent, PaymentMethod, PaymentStatus
from fitcoach.models.profile import StudentProfile, TrainerProfile
from fitcoach.models.training_session import SessionStatus, TrainingSession
from fitcoach.models.user import User
from fitcoach.services.base import names_by_id, transaction
from fitcoach.utils.logger import admin_logger

RECENT_PAYMENTS_LIMIT = 10
ACTIVITY_LIMIT = 10


def trainer_label(names: Dict[str, str], trainer_id: str) -> str:
    return names.get(trainer_id) or f"Trainer {trainer_id[-3:]}"


class AdminService:
    @staticmethod
    def _succeeded_revenue(db: Session, since: Optional[datetime] = None) -> int:
        query = db.query(func.coalesce(func.sum(PaymentIntent.amount), 0)).filter(
            PaymentIntent.status == PaymentStatus.succeeded
        )
        if since is not None:
            query = query.filter(PaymentIntent.created_at >= since)
        return int(query.scalar() or 0)

    @classmethod
    def get_admin_stats(cls, db: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or utcnow()

        active_trainers = (
            db.query(TrainerProfile)
            .join(User, User.id == TrainerProfile.id)
            .filter(User.is_active == True)
            .count()
        )
        total_students = db.query(StudentProfile).count()
        total_sessions = db.query(TrainingSession).count()
        completed_sessions = (
            db.query(TrainingSession).filter(TrainingSession.status == SessionStatus.completed).count()
        )
        weekly_signups = (
            db.query(TrainerProfile).filter(TrainerProfile.created_at >= now - timedelta(days=7)).count()
        )

        avg_sessions = round(completed_sessions / active_trainers, 1) if active_trainers else 0.0

        return {
            "active_trainers": active_trainers,
            "total_students": total_students,
            "total_revenue": cls._succeeded_revenue(db),
            "monthly_revenue": cls._succeeded_revenue(db, now - timedelta(days=30)),
            "total_sessions": total_sessions,
            "weekly_signups": weekly_signups,
            "avg_sessions_per_trainer": avg_sessions,
            "system_health": "healthy" if check_database_health(db) else "degraded",
        }

    @staticmethod
    def get_recent_payments(db: Session, limit: int = RECENT_PAYMENTS_LIMIT) -> List[Dict[str, Any]]:
        payments = (
            db.query(PaymentIntent)
            .order_by(PaymentIntent.created_at.desc())
            .limit(limit)
            .all()
        )
        names = names_by_id(db, (p.trainer_id for p in payments))
        return [
            {
                "id": p.id,
                "amount": p.amount,
                "status": PaymentStatus(p.status).value,
                "method": PaymentMethod(p.method).value,
                "created_at": p.created_at,
                "trainer_name": trainer_label(names, p.trainer_id),
            }
            for p in payments
        ]

    @staticmethod
    def get_admin_activity(db: Session) -> List[Dict[str, Any]]:
        payments = (
            db.query(PaymentIntent)
            .filter(PaymentIntent.status == PaymentStatus.succeeded)
            .order_by(PaymentIntent.created_at.desc())
            .limit(3)
            .all()
        )
        sessions = (
            db.query(TrainingSession)
            .filter(TrainingSession.status == SessionStatus.completed)
            .order_by(TrainingSession.updated_at.desc())
            .limit(2)
            .all()
        )
        trainers = db.query(TrainerProfile).order_by(TrainerProfile.created_at.desc()).limit(2).all()

        names = names_by_id(db, [s.student_id for s in sessions])

        activity = [
            {
                "id": f"payment-{p.id}",
                "type": "payment_processed",
                "description": f"Payment of R$ {p.amount / 100:.2f} processed successfully",
                "created_at": p.created_at,
            }
            for p in payments
        ]
        activity += [
            {
                "id": f"session-{s.id}",
                "type": "session_completed",
                "description": f"Session with {names.get(s.student_id) or 'a student'} completed",
                "created_at": s.updated_at or s.scheduled_at,
            }
            for s in sessions
        ]
        activity += [
            {
                "id": f"trainer-{t.id}",
                "type": "trainer_signup",
                "description": f"New trainer signed up on the {t.plan.value} plan",
                "created_at": t.created_at,
            }
            for t in trainers
        ]

        activity.sort(key=lambda item: item["created_at"], reverse=True)
        return activity[:ACTIVITY_LIMIT]

    @staticmethod
    def list_system_settings(db: Session) -> List[SystemSetting]:
        return db.query(SystemSetting).order_by(SystemSetting.key).all()

    @staticmethod
    def update_system_setting(db: Session, key: str, value: str) -> SystemSetting:
        setting = db.query(SystemSetting).filter(SystemSetting.key == key).first()
        if not setting:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Setting '{key}' not found",
            )
        with transaction(db, "updating system setting"):
            setting.value = value
        db.refresh(setting)
        admin_logger.info("System setting updated", "SETTINGS", key=key, value=value)
        return setting
