"""Local document store API endpoints.

Demo mode backed by a JSON file instead of the database: mode switching,
mock sign-in, data variations, demo dashboards and export/import into the
relational database.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db, get_service, require_admin
from fitcoach.models.profile import TrainerPlan
from fitcoach.schemas.admin import AdminActivity, AdminPayment, AdminStats
from fitcoach.schemas.base import MessageResponse
from fitcoach.schemas.dashboard import ActivityItem, TrainerStats, UpcomingSession
from fitcoach.schemas.local_data import (
    DataVariationRequest,
    ImportSummary,
    LocalModeResponse,
    LocalSessionResponse,
    LocalSignIn,
    LocalSignUp,
)
from fitcoach.services.local_auth import LocalAuthService
from fitcoach.services.local_dashboard import LocalDashboardService
from fitcoach.services.local_storage import (
    InvalidCredentialsError,
    LocalDataError,
    LocalDataStore,
    RecordNotFoundError,
    UserAlreadyExistsError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@contextmanager
def local_errors():
    """Translate document store errors into HTTP errors."""
    try:
        yield
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except LocalDataError as e:
        logger.warning(f"Local data error: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _session_response(store: LocalDataStore, session: Dict[str, Any]) -> LocalSessionResponse:
    return LocalSessionResponse(
        access_token=session["access_token"],
        refresh_token=session["refresh_token"],
        token_type=session.get("token_type", "bearer"),
        expires_at=session["expires_at"],
        user=session["user"],
        profile=store.get_profile_by_user_id(session["user"]["id"]),
    )


# Mode

@router.get("/mode", response_model=LocalModeResponse)
async def get_mode(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    return LocalModeResponse(enabled=store.should_use_local_storage())


@router.post("/mode/enable", response_model=LocalModeResponse)
async def enable_mode(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    """Switch to demo mode and seed the mock data if needed."""
    store.enable_local_storage_mode()
    return LocalModeResponse(enabled=True)


@router.post("/mode/disable", response_model=LocalModeResponse)
async def disable_mode(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    store.disable_local_storage_mode()
    return LocalModeResponse(enabled=False)


# Document

@router.post("/initialize", response_model=MessageResponse)
async def initialize_data(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    store.initialize_data()
    return MessageResponse(message="Local data ready")


@router.get("/data", response_model=Dict[str, Any])
async def get_data(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    data = store.get_data()
    if data is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No local data available")
    return data


@router.delete("/data", response_model=MessageResponse)
async def clear_data(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    """Remove the document and the local session."""
    store.clear_data()
    return MessageResponse(message="Local data cleared")


@router.post("/variation", response_model=MessageResponse)
async def add_data_variation(
    variation_data: DataVariationRequest,
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    """Reset the document to the full, minimal or empty demo data set."""
    with local_errors():
        store.add_data_variation(variation_data.variation)
    return MessageResponse(message=f"Applied '{variation_data.variation}' data variation")


@router.get("/demo-credentials", response_model=Dict[str, Dict[str, str]])
async def get_demo_credentials(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    return store.get_demo_credentials()


@router.get("/users", response_model=List[Dict[str, Any]])
async def get_users(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    return store.get_users()


@router.get("/profiles/{user_id}", response_model=Dict[str, Any])
async def get_profile(user_id: str, store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    """Profile with whichever role-specific profile exists."""
    profile = store.get_profile_by_user_id(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return {
        "profile": profile,
        "trainer_profile": store.get_trainer_profile_by_user_id(user_id),
        "student_profile": store.get_student_profile_by_user_id(user_id),
    }


@router.put("/trainers/{trainer_id}/plan", response_model=Dict[str, Any])
async def upgrade_trainer_plan(
    trainer_id: str,
    plan: TrainerPlan = Body(..., embed=True),
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    with local_errors():
        return store.upgrade_trainer_plan(trainer_id, plan.value)


@router.patch("/students/{student_id}/profile", response_model=Dict[str, Any])
async def update_student_profile(
    student_id: str,
    updates: Dict[str, Any] = Body(...),
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    with local_errors():
        return store.update_student_profile(student_id, updates)


# Auth

@router.post("/auth/sign-in", response_model=LocalSessionResponse)
async def sign_in(
    credentials: LocalSignIn,
    auth: LocalAuthService = Depends(get_service("LocalAuthService")),
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    """Sign in with any known email; passwords are not checked in demo mode."""
    with local_errors():
        session = auth.sign_in(credentials.email, credentials.password)
    return _session_response(store, session)


@router.post("/auth/sign-up", response_model=LocalSessionResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    user_data: LocalSignUp,
    auth: LocalAuthService = Depends(get_service("LocalAuthService")),
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    with local_errors():
        session = auth.sign_up(
            user_data.email, user_data.password, user_data.first_name, user_data.last_name, user_data.role.value
        )
    return _session_response(store, session)


@router.post("/auth/quick-login/{role}", response_model=LocalSessionResponse)
async def quick_login(
    role: Literal["admin", "trainer", "student"],
    auth: LocalAuthService = Depends(get_service("LocalAuthService")),
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    """Sign in as one of the demo accounts."""
    with local_errors():
        session = auth.quick_login(role)
    return _session_response(store, session)


@router.post("/auth/sign-out", response_model=MessageResponse)
async def sign_out(auth: LocalAuthService = Depends(get_service("LocalAuthService"))):
    auth.sign_out()
    return MessageResponse(message="Signed out")


@router.get("/auth/session", response_model=Optional[LocalSessionResponse])
async def get_current_session(
    auth: LocalAuthService = Depends(get_service("LocalAuthService")),
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    """The current local session, or null when signed out or expired."""
    session = auth.get_current_session()
    return _session_response(store, session) if session else None


@router.get("/auth/context", response_model=Dict[str, Any])
async def get_user_context(auth: LocalAuthService = Depends(get_service("LocalAuthService"))):
    context = auth.get_user_context()
    if context is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return context


# Dashboards

@router.get("/dashboard/trainer/stats", response_model=TrainerStats)
async def get_trainer_stats(dashboard: LocalDashboardService = Depends(get_service("LocalDashboardService"))):
    """Stats of the signed-in trainer (or the demo trainer); revenue in reais."""
    with local_errors():
        return dashboard.get_trainer_stats()


@router.get("/dashboard/trainer/upcoming-sessions", response_model=List[UpcomingSession])
async def get_upcoming_sessions(dashboard: LocalDashboardService = Depends(get_service("LocalDashboardService"))):
    with local_errors():
        return dashboard.get_upcoming_sessions()


@router.get("/dashboard/trainer/recent-activity", response_model=List[ActivityItem])
async def get_recent_activity(dashboard: LocalDashboardService = Depends(get_service("LocalDashboardService"))):
    with local_errors():
        return dashboard.get_recent_activity()


@router.get("/dashboard/admin/stats", response_model=AdminStats)
async def get_admin_stats(dashboard: LocalDashboardService = Depends(get_service("LocalDashboardService"))):
    with local_errors():
        return dashboard.get_admin_stats()


@router.get("/dashboard/admin/payments", response_model=List[AdminPayment])
async def get_admin_payments(dashboard: LocalDashboardService = Depends(get_service("LocalDashboardService"))):
    with local_errors():
        return dashboard.get_admin_recent_payments()


@router.get("/dashboard/admin/activity", response_model=List[AdminActivity])
async def get_admin_activity(dashboard: LocalDashboardService = Depends(get_service("LocalDashboardService"))):
    with local_errors():
        return dashboard.get_admin_activity()


# Export / import

@router.get("/export", response_model=Dict[str, Any])
async def export_for_database(store: LocalDataStore = Depends(get_service("LocalDataStore"))):
    """The document reshaped into relational tables."""
    return store.export_for_database()


@router.post("/import", response_model=ImportSummary, dependencies=[Depends(require_admin)])
async def import_into_database(
    db: Session = Depends(get_db),
    store: LocalDataStore = Depends(get_service("LocalDataStore")),
):
    """Copy the local document into the database; existing rows are skipped."""
    with local_errors():
        summary = store.import_into_database(db)
    return ImportSummary(**summary)
