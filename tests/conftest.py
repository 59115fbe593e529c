import os

os.environ.setdefault("ENVIRONMENT", "development")
os.environ["LOCAL_DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import fitcoach.models  # noqa: F401
from fitcoach.core.container import container
from fitcoach.core.setup import setup_modules
from fitcoach.db.base_class import Base
from fitcoach.db.session import get_db
from fitcoach.main import app
from fitcoach.models.profile import Profile, StudentProfile, TrainerPlan, TrainerProfile, UserRole
from fitcoach.models.user import User
from fitcoach.services.auth import AuthService
from fitcoach.services.local_storage import KeyValueFile, LocalDataStore
from fitcoach.services.plan_limits import get_plan_limits
from tests.utils_jwt import TEST_PASSWORD, auth_headers


@pytest.fixture
def engine():
    """In-memory SQLite engine shared by every connection of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create a SQLAlchemy session for tests."""
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def local_store(tmp_path):
    """Document store backed by a file in the test's temporary directory."""
    return LocalDataStore(KeyValueFile(str(tmp_path / "local_storage.json")))


@pytest.fixture
def client(db_session, local_store):
    """Create a FastAPI test client."""
    def override_get_db():
        yield db_session

    container.clear()
    setup_modules(container)
    container.bind("LocalDataStore").to_value(local_store)

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    # Clear dependency overrides
    app.dependency_overrides = {}
    container.clear()
    setup_modules(container)


@pytest.fixture(scope="session")
def password_hash():
    return AuthService.get_password_hash(TEST_PASSWORD)


@pytest.fixture
def make_user(db_session, password_hash):
    """
    Factory creating a user with its profile and role-specific profile.

    Returns the user; trainers get the limits of ``plan``.
    """
    counter = {"n": 0}

    def factory(role=UserRole.trainer, plan=TrainerPlan.free, trainer_id=None, email=None, first_name=None, **extra):
        counter["n"] += 1
        role = UserRole(role)
        user = User(
            email=email or f"{role.value}{counter['n']}@example.com",
            hashed_password=password_hash,
            is_active=extra.pop("is_active", True),
        )
        db_session.add(user)
        db_session.flush()

        db_session.add(Profile(
            id=user.id,
            first_name=first_name or f"{role.value.capitalize()}{counter['n']}",
            last_name="Test",
            role=role,
        ))
        db_session.flush()

        if role == UserRole.trainer:
            limits = get_plan_limits(plan)
            db_session.add(TrainerProfile(
                id=user.id,
                plan=TrainerPlan(plan),
                max_students=extra.pop("max_students", limits.max_students),
                ai_credits=extra.pop("ai_credits", limits.ai_credits),
            ))
        elif role == UserRole.student:
            db_session.add(StudentProfile(id=user.id, trainer_id=trainer_id, **extra))

        db_session.commit()
        db_session.refresh(user)
        return user

    return factory


@pytest.fixture
def trainer(make_user):
    return make_user(UserRole.trainer)


@pytest.fixture
def trainer_headers(trainer):
    return auth_headers(trainer, "trainer")


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.admin)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin, "admin")
