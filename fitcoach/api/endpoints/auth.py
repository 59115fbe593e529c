from typing import Any

from fastapi import APIRouter, Depends, Form, HTTPException, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_current_active_user, get_db, get_service
from fitcoach.core.config import settings
from fitcoach.models.user import User
from fitcoach.schemas.auth import (
    AuthContext,
    LoginResponse,
    RefreshTokenRequest,
    Token,
    UserLogin,
    UserRegister,
    UserRegisterResponse,
)
from fitcoach.schemas.base import MessageResponse
from fitcoach.services.auth import AuthService

router = APIRouter()


def _check_credentials(auth: AuthService, db: Session, email: str, password: str) -> User:
    user = auth.authenticate(db, email, password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account not active",
        )
    return user


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserRegisterResponse)
async def register(
    user_data: UserRegister,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_service("AuthService")),
) -> Any:
    """
    Register a trainer or student account with email and password.
    Trainers start on the free plan.
    """
    user = auth.register(db, user_data)

    return UserRegisterResponse(
        user_id=user.id,
        email=user.email,
        role=user_data.role,
        message="Account created successfully",
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_service("AuthService")),
) -> Any:
    """
    Authenticate a user with email and password and return access and refresh tokens.
    """
    user = _check_credentials(auth, db, login_data.email, login_data.password)
    role = auth.get_role(db, user.id)

    access_token = auth.create_access_token(user.id, role)
    refresh_token = auth.create_refresh_token(db, user.id)
    auth.update_last_sign_in(db, user)

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        refresh_token=refresh_token,
        user_id=user.id,
        role=role,
    )


# Direct token endpoint for Swagger UI authentication
@router.post("/token", response_model=Token)
async def login_for_access_token(
    username: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_service("AuthService")),
) -> Any:
    """
    OAuth2 compatible token login, get an access token for future requests.
    """
    user = _check_credentials(auth, db, username, password)

    return Token(
        access_token=auth.create_access_token(user.id, auth.get_role(db, user.id)),
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/refresh", response_model=Token)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_service("AuthService")),
) -> Any:
    """
    Get a new access token using a refresh token.
    """
    result = auth.refresh_access_token(db, refresh_data.refresh_token)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    access_token, _ = result
    return Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_service("AuthService")),
) -> Any:
    """
    Revoke every refresh token of the current user.
    """
    auth.revoke_all_refresh_tokens(db, current_user.id)
    return MessageResponse(message="Successfully logged out")


@router.get("/me", response_model=AuthContext)
async def read_current_user(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_service("AuthService")),
) -> Any:
    """
    Current user with profile and role-specific profile.
    """
    return auth.get_auth_context(db, current_user)
