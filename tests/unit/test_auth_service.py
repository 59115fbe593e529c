"""
Unit tests for AuthService.

This module contains focused unit tests for the AuthService class,
testing the core authentication functionality including:
- Password hashing and verification
- JWT token creation and decoding
- Registration of trainers and students
- Refresh tokens and role guards
"""

import hashlib
from datetime import timedelta
from unittest.mock import MagicMock

import jwt
import pytest
from fastapi import HTTPException, status

from fitcoach.core.config import settings
from fitcoach.models.auth import RefreshToken
from fitcoach.models.profile import StudentProfile, TrainerPlan, TrainerProfile, UserRole
from fitcoach.schemas.auth import UserRegister
from fitcoach.services.auth import AuthService, require_roles
from tests.utils_jwt import generate_test_jwt


class TestAuthServiceCore:
    """Test core AuthService functionality."""

    def test_password_hashing_and_verification(self):
        """
        Test password hashing and verification works correctly.

        This test ensures that passwords are properly hashed and
        can be verified correctly.
        """
        # Arrange: A test password
        password = "secure_password123"

        # Act: Hash the password
        hashed = AuthService.get_password_hash(password)

        # Assert: Hash should be valid and verifiable
        assert isinstance(hashed, str)
        assert hashed != password
        assert AuthService.verify_password(password, hashed) is True
        assert AuthService.verify_password("wrong_password", hashed) is False

    def test_verify_password_without_hash(self):
        assert AuthService.verify_password("anything", None) is False

    def test_random_string_generation(self):
        random_str = AuthService.generate_random_string()
        assert len(random_str) == 32
        assert random_str.isalnum()
        assert len(AuthService.generate_random_string(16)) == 16

    def test_jwt_token_creation_and_validation(self):
        """
        Test JWT token creation and validation.

        This test ensures that access tokens carry the user id and role.
        """
        # Act: Create access token
        token = AuthService.create_access_token("user-123", UserRole.trainer)

        # Assert: Token should be valid and contain correct data
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        assert payload["sub"] == "user-123"
        assert payload["role"] == "trainer"
        assert "exp" in payload

        decoded = AuthService.decode_access_token(token)
        assert decoded.sub == "user-123"

    def test_expired_token_is_rejected(self):
        token = AuthService.create_access_token("user-123", expires_delta=timedelta(minutes=-5))

        with pytest.raises(jwt.PyJWTError):
            AuthService.decode_access_token(token)

    def test_get_current_user_with_bad_token(self):
        mock_db = MagicMock()

        with pytest.raises(HTTPException) as exc_info:
            AuthService.get_current_user(mock_db, "not-a-token")

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_get_current_user_unknown_user(self):
        mock_db = MagicMock()
        mock_db.query.return_value.filter.return_value.first.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            AuthService.get_current_user(mock_db, generate_test_jwt("ghost"))

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED


class TestRegistration:
    def test_register_trainer_starts_on_free_plan(self, db_session):
        # Arrange
        data = UserRegister(email="Coach@Example.com", password="secret123", first_name="Coach", role="trainer")

        # Act
        user = AuthService.register(db_session, data)

        # Assert
        assert user.email == "coach@example.com"
        trainer_profile = db_session.query(TrainerProfile).filter(TrainerProfile.id == user.id).first()
        assert trainer_profile.plan == TrainerPlan.free
        assert trainer_profile.max_students == 3
        assert trainer_profile.ai_credits == 0
        assert AuthService.get_role(db_session, user.id) == UserRole.trainer

    def test_register_student_with_trainer(self, db_session, trainer):
        data = UserRegister(
            email="pupil@example.com", password="secret123", first_name="Pupil",
            role="student", trainer_id=trainer.id,
        )

        user = AuthService.register(db_session, data)

        student_profile = db_session.query(StudentProfile).filter(StudentProfile.id == user.id).first()
        assert student_profile.trainer_id == trainer.id

    def test_register_student_with_unknown_trainer(self, db_session):
        data = UserRegister(
            email="pupil@example.com", password="secret123", first_name="Pupil",
            role="student", trainer_id="missing",
        )

        with pytest.raises(HTTPException) as exc_info:
            AuthService.register(db_session, data)

        assert exc_info.value.status_code == status.HTTP_404_NOT_FOUND

    def test_register_duplicate_email(self, db_session, trainer):
        data = UserRegister(email=trainer.email, password="secret123", first_name="Again")

        with pytest.raises(HTTPException) as exc_info:
            AuthService.register(db_session, data)

        assert exc_info.value.status_code == status.HTTP_409_CONFLICT

    def test_admin_cannot_self_register(self):
        with pytest.raises(ValueError):
            UserRegister(email="root@example.com", password="secret123", first_name="Root", role="admin")


class TestRefreshTokens:
    def test_refresh_and_revoke(self, db_session, trainer):
        """
        Test the refresh token lifecycle.

        This test ensures that a refresh token yields a new access token
        until it is revoked.
        """
        token = AuthService.create_refresh_token(db_session, trainer.id)

        access_token, user_id = AuthService.refresh_access_token(db_session, token)
        assert user_id == trainer.id
        assert AuthService.decode_access_token(access_token).role == "trainer"

        AuthService.revoke_all_refresh_tokens(db_session, trainer.id)

        assert AuthService.refresh_access_token(db_session, token) is None
        assert db_session.query(RefreshToken).filter(RefreshToken.is_revoked == False).count() == 0

    def test_refresh_token_is_stored_as_digest(self, db_session, trainer):
        token = AuthService.create_refresh_token(db_session, trainer.id)

        stored = db_session.query(RefreshToken).filter(RefreshToken.user_id == trainer.id).one()
        assert stored.token != token
        assert stored.token == hashlib.sha256(token.encode("utf-8")).hexdigest()
        assert AuthService.refresh_access_token(db_session, stored.token) is None

    def test_unknown_refresh_token(self, db_session):
        assert AuthService.refresh_access_token(db_session, "nope") is None


class TestRoleGuard:
    def test_require_roles_rejects_other_roles(self, db_session, make_user):
        student = make_user(UserRole.student)
        guard = require_roles(UserRole.trainer)

        with pytest.raises(HTTPException) as exc_info:
            guard(current_user=student, db=db_session)

        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN

    def test_require_roles_accepts_allowed_role(self, db_session, trainer):
        guard = require_roles(UserRole.trainer, UserRole.admin)
        assert guard(current_user=trainer, db=db_session) is trainer
