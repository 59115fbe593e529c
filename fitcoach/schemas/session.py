from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fitcoach.models.training_session import SessionStatus
from fitcoach.schemas.base import BaseSchema


class SessionCreate(BaseModel):
    student_id: str
    scheduled_at: datetime
    duration_minutes: int = Field(60, ge=1, le=480)
    notes: Optional[str] = None


class SessionStatusUpdate(BaseModel):
    status: SessionStatus


class SessionResponse(BaseSchema):
    id: str
    trainer_id: str
    student_id: str
    scheduled_at: datetime
    duration_minutes: int
    status: SessionStatus
    notes: Optional[str] = None
    student_name: Optional[str] = None
    created_at: Optional[datetime] = None
