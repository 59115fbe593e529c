"""Profile schemas.

Response and update models for the shared profile and the role-specific
trainer and student profiles.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fitcoach.models.profile import StudentStatus, TrainerPlan, UserRole
from fitcoach.schemas.base import BaseSchema


class UserResponse(BaseSchema):
    id: str
    email: str
    is_active: bool
    email_confirmed_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ProfileResponse(BaseSchema):
    id: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: UserRole
    created_at: Optional[datetime] = None


class TrainerProfileResponse(BaseSchema):
    id: str
    plan: TrainerPlan
    max_students: int
    ai_credits: int
    active_until: Optional[datetime] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    whatsapp_number: Optional[str] = None


class StudentProfileResponse(BaseSchema):
    id: str
    trainer_id: Optional[str] = None
    gender: Optional[str] = None
    menstrual_cycle_tracking: bool = False
    start_date: Optional[datetime] = None
    status: StudentStatus


class ProfileUpdate(BaseModel):
    """Partial update of the shared profile; unset fields are left alone."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = None


class TrainerProfileUpdate(BaseModel):
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    whatsapp_number: Optional[str] = None


class StudentProfileUpdate(BaseModel):
    gender: Optional[str] = None
    menstrual_cycle_tracking: Optional[bool] = None
