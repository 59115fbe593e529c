import hashlib
import secrets
import string
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from fitcoach.core.config import settings
from fitcoach.db.base_class import utcnow
from fitcoach.db.session import get_db
from fitcoach.models.auth import RefreshToken
from fitcoach.models.profile import Profile, StudentProfile, TrainerPlan, TrainerProfile, UserRole
from fitcoach.models.user import User
from fitcoach.schemas.auth import TokenPayload, UserRegister
from fitcoach.services.base import transaction
from fitcoach.services.plan_limits import get_plan_limits
from fitcoach.utils.logger import auth_logger

# The token endpoint is specifically for Swagger UI authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_PREFIX}/auth/token")


class AuthService:
    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        if not hashed_password:
            return False
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password for storage."""
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    @staticmethod
    def generate_random_string(length: int = 32) -> str:
        """Generate a random string for tokens."""
        alphabet = string.ascii_letters + string.digits
        return "".join(secrets.choice(alphabet) for _ in range(length))

    @classmethod
    def get_user_by_email(cls, db: Session, email: str) -> Optional[User]:
        """Get a user by email."""
        return db.query(User).filter(User.email == email.lower()).first()

    @classmethod
    def get_role(cls, db: Session, user_id: str) -> Optional[UserRole]:
        profile = db.query(Profile).filter(Profile.id == user_id).first()
        return profile.role if profile else None

    @classmethod
    def register(cls, db: Session, data: UserRegister) -> User:
        """
        Create a user with its profile and role-specific profile.

        Trainers start on the free plan. Students may name the trainer they
        belong to; an unknown trainer id is rejected.
        """
        if data.role not in (UserRole.trainer, UserRole.student):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Only trainer and student accounts can be self-registered",
            )

        if cls.get_user_by_email(db, data.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered",
            )

        if data.role == UserRole.student and data.trainer_id:
            trainer = db.query(TrainerProfile).filter(TrainerProfile.id == data.trainer_id).first()
            if not trainer:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Trainer not found",
                )

        auth_logger.info(f"Registering {data.role.value} account", "REGISTER", email=data.email)

        with transaction(db, "registering user"):
            user = User(
                email=data.email.lower(),
                hashed_password=cls.get_password_hash(data.password),
                is_active=True,
            )
            db.add(user)
            db.flush()

            db.add(Profile(
                id=user.id,
                first_name=data.first_name,
                last_name=data.last_name,
                phone=data.phone,
                role=data.role,
            ))
            db.flush()

            if data.role == UserRole.trainer:
                limits = get_plan_limits(TrainerPlan.free)
                db.add(TrainerProfile(
                    id=user.id,
                    plan=TrainerPlan.free,
                    max_students=limits.max_students,
                    ai_credits=limits.ai_credits,
                ))
            else:
                db.add(StudentProfile(id=user.id, trainer_id=data.trainer_id))

        db.refresh(user)
        auth_logger.success("Account registered", "REGISTER", user_id=user.id)
        return user

    @classmethod
    def authenticate(cls, db: Session, email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, otherwise None."""
        user = cls.get_user_by_email(db, email)
        if not user or not cls.verify_password(password, user.hashed_password):
            auth_logger.warning("Invalid credentials", "LOGIN", email=email)
            return None
        return user

    @classmethod
    def update_last_sign_in(cls, db: Session, user: User) -> None:
        """Update the user's last sign-in timestamp."""
        user.last_sign_in_at = utcnow()
        with transaction(db, "updating last sign in"):
            db.add(user)

    @classmethod
    def create_access_token(cls, user_id: str, role: Optional[str] = None, expires_delta: timedelta = None) -> str:
        """Create a new JWT access token."""
        if expires_delta is None:
            expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

        expire = utcnow() + expires_delta
        to_encode = {"sub": str(user_id), "exp": expire}
        if role:
            to_encode["role"] = role.value if isinstance(role, UserRole) else str(role)

        return jwt.encode(
            to_encode,
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )

    @classmethod
    def decode_access_token(cls, token: str) -> TokenPayload:
        """Decode and validate a JWT. Raises ``jwt.PyJWTError`` on failure."""
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
        return TokenPayload(**payload)

    @staticmethod
    def hash_refresh_token(token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    @classmethod
    def create_refresh_token(cls, db: Session, user_id: str) -> str:
        """Create a new refresh token; only its sha256 digest is stored."""
        token = cls.generate_random_string(64)
        expires_at = utcnow() + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

        with transaction(db, "creating refresh token"):
            db.add(RefreshToken(token=cls.hash_refresh_token(token), user_id=user_id, expires_at=expires_at))

        return token

    @classmethod
    def refresh_access_token(cls, db: Session, refresh_token: str) -> Optional[Tuple[str, str]]:
        """Generate a new access token using a refresh token."""
        token_record = (
            db.query(RefreshToken)
            .filter(
                RefreshToken.token == cls.hash_refresh_token(refresh_token),
                RefreshToken.is_revoked == False,
                RefreshToken.expires_at > utcnow(),
            )
            .first()
        )

        if not token_record:
            return None

        role = cls.get_role(db, token_record.user_id)
        access_token = cls.create_access_token(token_record.user_id, role)

        return access_token, token_record.user_id

    @classmethod
    def revoke_all_refresh_tokens(cls, db: Session, user_id: str) -> None:
        """Revoke all refresh tokens for a user (logout from all devices)."""
        with transaction(db, "revoking refresh tokens"):
            db.query(RefreshToken).filter(
                RefreshToken.user_id == user_id,
                RefreshToken.is_revoked == False,
            ).update({"is_revoked": True})

    @classmethod
    def get_auth_context(cls, db: Session, user: User) -> Dict[str, Any]:
        """User, profile and whichever role-specific profile exists."""
        profile = db.query(Profile).filter(Profile.id == user.id).first()
        trainer_profile = None
        student_profile = None
        if profile and profile.role == UserRole.trainer:
            trainer_profile = db.query(TrainerProfile).filter(TrainerProfile.id == user.id).first()
        elif profile and profile.role == UserRole.student:
            student_profile = db.query(StudentProfile).filter(StudentProfile.id == user.id).first()

        return {
            "user": user,
            "profile": profile,
            "trainer_profile": trainer_profile,
            "student_profile": student_profile,
        }

    @classmethod
    def get_current_user(cls, db: Session, token: str) -> User:
        """Get the current authenticated user from the token."""
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

        try:
            token_data = cls.decode_access_token(token)
        except (jwt.PyJWTError, ValueError):
            raise credentials_exception

        user = db.query(User).filter(User.id == token_data.sub).first()
        if user is None:
            raise credentials_exception

        return user


# Standalone dependency functions for FastAPI
def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    """Get the current authenticated user from the token."""
    return AuthService.get_current_user(db, token)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Check if the current user is active."""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user",
        )
    return current_user


def require_roles(*roles: UserRole):
    """Dependency factory that only lets users with one of ``roles`` through."""
    allowed = {UserRole(role) for role in roles}

    def dependency(
        current_user: User = Depends(get_current_active_user),
        db: Session = Depends(get_db),
    ) -> User:
        role = AuthService.get_role(db, current_user.id)
        if role not in allowed:
            auth_logger.warning("Role not allowed", "GUARD", user_id=current_user.id, role=role)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return current_user

    return dependency
