"""Schemas for the local document store endpoints."""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from fitcoach.models.profile import UserRole


class LocalSignIn(BaseModel):
    email: EmailStr
    password: str = ""


class LocalSignUp(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.trainer


class LocalSessionResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_at: int
    user: Dict[str, Any]
    profile: Optional[Dict[str, Any]] = None


class DataVariationRequest(BaseModel):
    variation: Literal["empty", "minimal", "full"]


class LocalModeResponse(BaseModel):
    enabled: bool


class ImportSummary(BaseModel):
    users: int = 0
    profiles: int = 0
    trainer_profiles: int = 0
    student_profiles: int = 0
    sessions: int = 0
    payment_intents: int = 0
    diet_plans: int = 0
    workout_plans: int = 0
    notifications: int = 0
    system_settings: int = 0
