"""Admin management of trainer accounts."""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from fitcoach.models.profile import Profile, StudentProfile, StudentStatus, TrainerPlan, TrainerProfile
from fitcoach.models.user import User
from fitcoach.services.base import get_or_404, transaction
from fitcoach.services.payment import apply_plan
from fitcoach.utils.logger import admin_logger


def filter_trainers(
    trainers: List[Dict[str, Any]], search: Optional[str] = None, plan: Optional[str] = "all"
) -> List[Dict[str, Any]]:
    """Case-insensitive full-name search plus an exact plan filter (``all`` keeps every plan)."""
    term = (search or "").strip().lower()
    result = []
    for trainer in trainers:
        name = f"{trainer['first_name']} {trainer['last_name']}".lower()
        if term and term not in name:
            continue
        trainer_plan = (trainer.get("trainer_profile") or {}).get("plan")
        if plan and plan != "all" and TrainerPlan(trainer_plan or TrainerPlan.free) != TrainerPlan(plan):
            continue
        result.append(trainer)
    return result


class TrainerManagementService:
    @staticmethod
    def list_trainers(db: Session) -> List[Dict[str, Any]]:
        """Active trainers, newest first, with their plan and active student count."""
        rows = (
            db.query(TrainerProfile, Profile, User)
            .join(Profile, Profile.id == TrainerProfile.id)
            .join(User, User.id == TrainerProfile.id)
            .filter(User.is_active == True)
            .order_by(TrainerProfile.created_at.desc())
            .all()
        )
        counts = dict(
            db.query(StudentProfile.trainer_id, func.count(StudentProfile.id))
            .filter(StudentProfile.status == StudentStatus.active)
            .group_by(StudentProfile.trainer_id)
            .all()
        )
        return [
            {
                "id": trainer.id,
                "first_name": profile.first_name or "",
                "last_name": profile.last_name or "",
                "email": user.email,
                "phone": profile.phone,
                "created_at": profile.created_at,
                "trainer_profile": {
                    "plan": trainer.plan,
                    "max_students": trainer.max_students,
                    "ai_credits": trainer.ai_credits,
                    "active_until": trainer.active_until,
                },
                "student_count": counts.get(trainer.id, 0),
            }
            for trainer, profile, user in rows
        ]

    @classmethod
    def filter_trainers(cls, db: Session, search: Optional[str] = None, plan: Optional[str] = "all") -> List[Dict[str, Any]]:
        if plan and plan != "all" and plan not in TrainerPlan.__members__:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Unknown plan filter: {plan}",
            )
        return filter_trainers(cls.list_trainers(db), search, plan)

    @staticmethod
    def _get_trainer(db: Session, trainer_id: str) -> TrainerProfile:
        return get_or_404(db, TrainerProfile, trainer_id, "Trainer not found")

    @classmethod
    def update_trainer_plan(cls, db: Session, trainer_id: str, plan: TrainerPlan) -> TrainerProfile:
        trainer_profile = cls._get_trainer(db, trainer_id)
        with transaction(db, "updating trainer plan"):
            apply_plan(trainer_profile, plan, trainer_profile.active_until)
        db.refresh(trainer_profile)
        admin_logger.info("Trainer plan changed by admin", "TRAINERS", trainer_id=trainer_id, plan=plan.value)
        return trainer_profile

    @classmethod
    def remove_trainer(cls, db: Session, trainer_id: str) -> None:
        """Deactivate the trainer account; data is kept."""
        cls._get_trainer(db, trainer_id)
        user = get_or_404(db, User, trainer_id, "Trainer not found")
        with transaction(db, "deactivating trainer"):
            user.is_active = False
        admin_logger.warning("Trainer deactivated", "TRAINERS", trainer_id=trainer_id)
