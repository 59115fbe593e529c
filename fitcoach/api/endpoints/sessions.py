from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db, get_service, require_student, require_trainer
from fitcoach.models.user import User
from fitcoach.schemas.session import SessionCreate, SessionResponse, SessionStatusUpdate
from fitcoach.schemas.student import ActiveStudent
from fitcoach.services.session import SessionService

router = APIRouter()


@router.get("/", response_model=List[SessionResponse])
async def list_sessions(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_service("SessionService")),
):
    """List the trainer's sessions in schedule order."""
    return sessions.list_sessions(db=db, trainer_id=current_user.id)


@router.post("/", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    session_data: SessionCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_service("SessionService")),
):
    """Schedule a session with an active student."""
    return sessions.create_session(db=db, trainer_id=current_user.id, session_data=session_data)


@router.get("/students", response_model=List[ActiveStudent])
async def list_schedulable_students(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_service("SessionService")),
):
    return sessions.list_active_students(db=db, trainer_id=current_user.id)


@router.get("/mine", response_model=List[SessionResponse])
async def list_my_sessions(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_service("SessionService")),
):
    """Sessions of the signed-in student."""
    return sessions.list_student_sessions(db=db, student_id=current_user.id)


@router.patch("/{session_id}/status", response_model=SessionResponse)
async def update_session_status(
    session_id: str,
    status_data: SessionStatusUpdate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_service("SessionService")),
):
    """Complete or cancel a scheduled session."""
    return sessions.update_status(
        db=db, trainer_id=current_user.id, session_id=session_id, new_status=status_data.status
    )
