"""Profile service.

Reads and partial updates of the shared profile and the role-specific
trainer and student profiles.
"""

from sqlalchemy.orm import Session

from fitcoach.models.profile import Profile, StudentProfile, TrainerProfile
from fitcoach.schemas.profile import ProfileUpdate, StudentProfileUpdate, TrainerProfileUpdate
from fitcoach.services.base import get_or_404, transaction


class ProfileService:
    """Service class for profile operations."""

    @staticmethod
    def get_profile(db: Session, user_id: str) -> Profile:
        """Get profile by user ID."""
        return get_or_404(db, Profile, user_id, "Profile not found")

    @staticmethod
    def update_profile(db: Session, user_id: str, profile_data: ProfileUpdate) -> Profile:
        profile = ProfileService.get_profile(db, user_id)
        with transaction(db, "updating profile"):
            for field, value in profile_data.model_dump(exclude_unset=True).items():
                setattr(profile, field, value)
        db.refresh(profile)
        return profile

    @staticmethod
    def get_trainer_profile(db: Session, trainer_id: str) -> TrainerProfile:
        return get_or_404(db, TrainerProfile, trainer_id, "Trainer profile not found")

    @staticmethod
    def update_trainer_profile(
        db: Session, trainer_id: str, profile_data: TrainerProfileUpdate
    ) -> TrainerProfile:
        """Update the public trainer fields; plan and limits change only through payments."""
        trainer_profile = ProfileService.get_trainer_profile(db, trainer_id)
        with transaction(db, "updating trainer profile"):
            for field, value in profile_data.model_dump(exclude_unset=True).items():
                setattr(trainer_profile, field, value)
        db.refresh(trainer_profile)
        return trainer_profile

    @staticmethod
    def get_student_profile(db: Session, student_id: str) -> StudentProfile:
        return get_or_404(db, StudentProfile, student_id, "Student profile not found")

    @staticmethod
    def update_student_profile(
        db: Session, student_id: str, profile_data: StudentProfileUpdate
    ) -> StudentProfile:
        student_profile = ProfileService.get_student_profile(db, student_id)
        with transaction(db, "updating student profile"):
            for field, value in profile_data.model_dump(exclude_unset=True).items():
                setattr(student_profile, field, value)
        db.refresh(student_profile)
        return student_profile
