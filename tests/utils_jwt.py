import jwt
from datetime import datetime, timedelta, timezone
from fitcoach.core.config import settings

TEST_PASSWORD = "secret123"

def generate_test_jwt(user_id="user_1", role=None, expires_in=timedelta(hours=1)):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "exp": now + expires_in,
        "iat": now,
    }
    if role:
        payload["role"] = role
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token

def auth_headers(user, role=None):
    """Return an Authorization header with a valid JWT for ``user``."""
    token = generate_test_jwt(user_id=user.id, role=role)
    return {"Authorization": f"Bearer {token}"}
