"""Student roster service.

Trainers list, add and change the status of their students. Adding or
re-activating a student is gated by the trainer's plan limits.
"""

from typing import Any, Dict, List

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from fitcoach.core.config import settings
from fitcoach.models.profile import Profile, StudentProfile, StudentStatus, TrainerProfile, UserRole
from fitcoach.models.user import User
from fitcoach.schemas.student import StudentCreate
from fitcoach.services.auth import AuthService
from fitcoach.services.base import get_or_404, transaction
from fitcoach.services.plan_limits import PlanLimitsService
from fitcoach.utils.logger import student_logger


class StudentService:
    """Service class for a trainer's student roster."""

    @staticmethod
    def _get_trainer_profile(db: Session, trainer_id: str) -> TrainerProfile:
        return get_or_404(db, TrainerProfile, trainer_id, "Trainer profile not found")

    @staticmethod
    def count_active_students(db: Session, trainer_id: str) -> int:
        return (
            db.query(StudentProfile)
            .filter(
                StudentProfile.trainer_id == trainer_id,
                StudentProfile.status == StudentStatus.active,
            )
            .count()
        )

    @classmethod
    def _ensure_capacity(cls, db: Session, trainer_profile: TrainerProfile) -> None:
        active = cls.count_active_students(db, trainer_profile.id)
        if not PlanLimitsService.can_add_students(trainer_profile, active):
            student_logger.warning(
                "Student limit reached", "LIMITS",
                trainer_id=trainer_profile.id, plan=trainer_profile.plan, active=active,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Student limit reached for your plan. Upgrade to add more students.",
            )

    @staticmethod
    def list_students(db: Session, trainer_id: str) -> List[Dict[str, Any]]:
        """All students of a trainer, newest first."""
        rows = (
            db.query(StudentProfile, Profile, User)
            .join(Profile, Profile.id == StudentProfile.id)
            .join(User, User.id == StudentProfile.id)
            .filter(StudentProfile.trainer_id == trainer_id)
            .order_by(StudentProfile.created_at.desc())
            .all()
        )
        return [
            {
                "id": student.id,
                "first_name": profile.first_name or "",
                "last_name": profile.last_name or "",
                "phone": profile.phone,
                "email": user.email,
                "start_date": student.start_date,
                "status": student.status,
            }
            for student, profile, user in rows
        ]

    @classmethod
    def add_student(cls, db: Session, trainer_id: str, student_data: StudentCreate) -> Dict[str, Any]:
        """
        Create a student account and attach it to the trainer.

        The student signs in with the configured temporary password.
        """
        trainer_profile = cls._get_trainer_profile(db, trainer_id)
        cls._ensure_capacity(db, trainer_profile)

        email = student_data.email.lower()
        if db.query(User).filter(User.email == email).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A user with this email already exists",
            )

        student_logger.info("Adding student", "CREATE", trainer_id=trainer_id, email=email)

        with transaction(db, "adding student"):
            user = User(
                email=email,
                hashed_password=AuthService.get_password_hash(settings.STUDENT_TEMP_PASSWORD),
                is_active=True,
            )
            db.add(user)
            db.flush()

            db.add(Profile(
                id=user.id,
                first_name=student_data.first_name,
                last_name=student_data.last_name,
                phone=student_data.phone,
                role=UserRole.student,
            ))
            db.flush()

            student = StudentProfile(
                id=user.id,
                trainer_id=trainer_id,
                status=StudentStatus.active,
            )
            db.add(student)

        db.refresh(student)
        student_logger.success("Student added", "CREATE", student_id=student.id)
        return {
            "id": student.id,
            "first_name": student_data.first_name,
            "last_name": student_data.last_name,
            "phone": student_data.phone,
            "email": email,
            "start_date": student.start_date,
            "status": student.status,
        }

    @classmethod
    def update_status(
        cls, db: Session, trainer_id: str, student_id: str, new_status: StudentStatus
    ) -> StudentProfile:
        student = (
            db.query(StudentProfile)
            .filter(StudentProfile.id == student_id, StudentProfile.trainer_id == trainer_id)
            .first()
        )
        if not student:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Student not found",
            )

        if new_status == StudentStatus.active and student.status != StudentStatus.active:
            cls._ensure_capacity(db, cls._get_trainer_profile(db, trainer_id))

        with transaction(db, "updating student status"):
            student.status = new_status

        db.refresh(student)
        student_logger.info("Student status updated", "STATUS", student_id=student_id, status=new_status.value)
        return student

    @staticmethod
    def get_student_stats(db: Session, trainer_id: str) -> Dict[str, int]:
        counts = dict(
            db.query(StudentProfile.status, func.count(StudentProfile.id))
            .filter(StudentProfile.trainer_id == trainer_id)
            .group_by(StudentProfile.status)
            .all()
        )
        active = counts.get(StudentStatus.active, 0)
        paused = counts.get(StudentStatus.paused, 0)
        cancelled = counts.get(StudentStatus.cancelled, 0)
        return {
            "total": active + paused + cancelled,
            "active": active,
            "paused": paused,
            "cancelled": cancelled,
        }
