from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from fitcoach.models.profile import UserRole
from fitcoach.schemas.profile import ProfileResponse, StudentProfileResponse, TrainerProfileResponse, UserResponse

# NOTE: email-validator is required by Pydantic for EmailStr validation


# Registration schemas
class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    role: UserRole = UserRole.trainer
    phone: Optional[str] = None
    trainer_id: Optional[str] = None

    @field_validator("role")
    @classmethod
    def role_must_be_self_service(cls, value: UserRole) -> UserRole:
        if value == UserRole.admin:
            raise ValueError("Admin accounts cannot be self-registered")
        return value


class UserRegisterResponse(BaseModel):
    user_id: str
    email: EmailStr
    role: UserRole
    message: str


# Login schemas
class UserLogin(BaseModel):
    email: EmailStr
    password: str


# Token schemas
class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int


class LoginResponse(Token):
    refresh_token: str
    user_id: str
    role: UserRole


class TokenPayload(BaseModel):
    sub: str
    role: Optional[str] = None
    exp: int


# Refresh token schemas
class RefreshTokenRequest(BaseModel):
    refresh_token: str


class AuthContext(BaseModel):
    """Everything a client needs to render the signed-in user."""

    user: UserResponse
    profile: Optional[ProfileResponse] = None
    trainer_profile: Optional[TrainerProfileResponse] = None
    student_profile: Optional[StudentProfileResponse] = None
