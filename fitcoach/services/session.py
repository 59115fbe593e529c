"""Training session scheduling service."""

from typing import Any, Dict, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fitcoach.db.base_class import to_naive_utc
from fitcoach.models.profile import Profile, StudentProfile, StudentStatus
from fitcoach.models.training_session import SessionStatus, TrainingSession
from fitcoach.schemas.session import SessionCreate
from fitcoach.services.base import names_by_id, transaction
from fitcoach.utils.logger import session_logger

UNKNOWN_STUDENT = "Unknown student"
MIN_DURATION_MINUTES = 1
MAX_DURATION_MINUTES = 480

# Allowed status transitions
TRANSITIONS = {
    SessionStatus.scheduled: {SessionStatus.completed, SessionStatus.cancelled},
    SessionStatus.completed: set(),
    SessionStatus.cancelled: set(),
}


def session_to_dict(session: TrainingSession, student_name: str = UNKNOWN_STUDENT) -> Dict[str, Any]:
    return {
        "id": session.id,
        "trainer_id": session.trainer_id,
        "student_id": session.student_id,
        "scheduled_at": session.scheduled_at,
        "duration_minutes": session.duration_minutes,
        "status": session.status,
        "notes": session.notes,
        "student_name": student_name,
        "created_at": session.created_at,
    }


class SessionService:
    @staticmethod
    def list_active_students(db: Session, trainer_id: str) -> List[Dict[str, str]]:
        rows = (
            db.query(Profile)
            .join(StudentProfile, StudentProfile.id == Profile.id)
            .filter(
                StudentProfile.trainer_id == trainer_id,
                StudentProfile.status == StudentStatus.active,
            )
            .order_by(Profile.first_name)
            .all()
        )
        return [
            {"id": p.id, "first_name": p.first_name or "", "last_name": p.last_name or ""}
            for p in rows
        ]

    @staticmethod
    def list_sessions(db: Session, trainer_id: str) -> List[Dict[str, Any]]:
        """All sessions of a trainer in chronological order."""
        sessions = (
            db.query(TrainingSession)
            .filter(TrainingSession.trainer_id == trainer_id)
            .order_by(TrainingSession.scheduled_at.asc())
            .all()
        )
        names = names_by_id(db, (s.student_id for s in sessions), UNKNOWN_STUDENT)
        return [session_to_dict(s, names.get(s.student_id, UNKNOWN_STUDENT)) for s in sessions]

    @staticmethod
    def create_session(db: Session, trainer_id: str, session_data: SessionCreate) -> Dict[str, Any]:
        if not MIN_DURATION_MINUTES <= session_data.duration_minutes <= MAX_DURATION_MINUTES:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Duration must be between {MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES} minutes",
            )

        student = (
            db.query(StudentProfile)
            .filter(
                StudentProfile.id == session_data.student_id,
                StudentProfile.trainer_id == trainer_id,
            )
            .first()
        )
        if not student:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Student not found",
            )
        if student.status != StudentStatus.active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Sessions can only be scheduled for active students",
            )

        session = TrainingSession(
            trainer_id=trainer_id,
            student_id=session_data.student_id,
            scheduled_at=to_naive_utc(session_data.scheduled_at),
            duration_minutes=session_data.duration_minutes,
            status=SessionStatus.scheduled,
            notes=session_data.notes,
        )
        with transaction(db, "creating session"):
            db.add(session)
        db.refresh(session)

        session_logger.success("Session scheduled", "CREATE", session_id=session.id, at=session.scheduled_at)
        names = names_by_id(db, [session.student_id], UNKNOWN_STUDENT)
        return session_to_dict(session, names.get(session.student_id, UNKNOWN_STUDENT))

    @staticmethod
    def update_status(
        db: Session, trainer_id: str, session_id: str, new_status: SessionStatus
    ) -> Dict[str, Any]:
        session = (
            db.query(TrainingSession)
            .filter(TrainingSession.id == session_id, TrainingSession.trainer_id == trainer_id)
            .first()
        )
        if not session:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Session not found",
            )

        current = SessionStatus(session.status)
        if new_status not in TRANSITIONS[current]:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot change session status from {current.value} to {new_status.value}",
            )

        with transaction(db, "updating session status"):
            session.status = new_status
        db.refresh(session)

        session_logger.info("Session status updated", "STATUS", session_id=session_id, status=new_status.value)
        names = names_by_id(db, [session.student_id], UNKNOWN_STUDENT)
        return session_to_dict(session, names.get(session.student_id, UNKNOWN_STUDENT))

    @staticmethod
    def list_student_sessions(db: Session, student_id: str) -> List[Dict[str, Any]]:
        sessions = (
            db.query(TrainingSession)
            .filter(TrainingSession.student_id == student_id)
            .order_by(TrainingSession.scheduled_at.asc())
            .all()
        )
        names = names_by_id(db, [student_id], UNKNOWN_STUDENT)
        return [session_to_dict(s, names.get(student_id, UNKNOWN_STUDENT)) for s in sessions]
