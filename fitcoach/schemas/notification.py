from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from fitcoach.schemas.base import BaseSchema


class NotificationResponse(BaseSchema):
    id: str
    user_id: str
    title: str
    message: str
    type: str
    read: bool
    created_at: Optional[datetime] = None


class NotificationCreate(BaseModel):
    user_id: str
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    type: str = "system"


class MarkAllReadResponse(BaseModel):
    updated: int
