from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from fitcoach.models.profile import StudentStatus
from fitcoach.schemas.base import BaseSchema


class StudentCreate(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field("", max_length=100)
    phone: Optional[str] = None


class StudentStatusUpdate(BaseModel):
    status: StudentStatus


class StudentListItem(BaseSchema):
    id: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    email: str
    start_date: Optional[datetime] = None
    status: StudentStatus


class StudentStats(BaseModel):
    total: int
    active: int
    paused: int
    cancelled: int


class ActiveStudent(BaseModel):
    id: str
    first_name: str
    last_name: str
