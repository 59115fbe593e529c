"""Profile API endpoints.

The shared profile of the current user plus the trainer- and student-specific
profile records.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_current_active_user, get_db, get_service, require_student, require_trainer
from fitcoach.models.user import User
from fitcoach.schemas.profile import (
    ProfileResponse,
    ProfileUpdate,
    StudentProfileResponse,
    StudentProfileUpdate,
    TrainerProfileResponse,
    TrainerProfileUpdate,
)
from fitcoach.services.profile import ProfileService

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    profiles: ProfileService = Depends(get_service("ProfileService")),
):
    """Get the current user's profile."""
    return profiles.get_profile(db=db, user_id=current_user.id)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    profiles: ProfileService = Depends(get_service("ProfileService")),
):
    """Update the current user's profile."""
    return profiles.update_profile(db=db, user_id=current_user.id, profile_data=profile_data)


@router.get("/me/trainer", response_model=TrainerProfileResponse)
async def get_my_trainer_profile(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    profiles: ProfileService = Depends(get_service("ProfileService")),
):
    return profiles.get_trainer_profile(db=db, trainer_id=current_user.id)


@router.put("/me/trainer", response_model=TrainerProfileResponse)
async def update_my_trainer_profile(
    profile_data: TrainerProfileUpdate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    profiles: ProfileService = Depends(get_service("ProfileService")),
):
    """Update bio, avatar and WhatsApp number."""
    return profiles.update_trainer_profile(db=db, trainer_id=current_user.id, profile_data=profile_data)


@router.get("/me/student", response_model=StudentProfileResponse)
async def get_my_student_profile(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
    profiles: ProfileService = Depends(get_service("ProfileService")),
):
    return profiles.get_student_profile(db=db, student_id=current_user.id)


@router.put("/me/student", response_model=StudentProfileResponse)
async def update_my_student_profile(
    profile_data: StudentProfileUpdate,
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
    profiles: ProfileService = Depends(get_service("ProfileService")),
):
    return profiles.update_student_profile(db=db, student_id=current_user.id, profile_data=profile_data)
