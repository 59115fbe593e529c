import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text

from fitcoach.db.base_class import Base, generate_id, utcnow


class SessionStatus(str, enum.Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"


class TrainingSession(Base):
    """A coaching appointment between a trainer and one of their students."""

    __tablename__ = "sessions"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    scheduled_at = Column(DateTime, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False, default=60)
    status = Column(Enum(SessionStatus, name="session_status"), nullable=False, default=SessionStatus.scheduled)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
