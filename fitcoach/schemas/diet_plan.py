from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fitcoach.schemas.base import BaseSchema


class DietPlanCreate(BaseModel):
    student_id: str
    name: str = Field(..., min_length=1, max_length=200)
    target_calories: int = Field(..., gt=0, le=10000)
    goal: str = Field(..., min_length=1)
    restrictions: List[str] = []
    preferences: List[str] = []


class DietPlanResponse(BaseSchema):
    id: str
    trainer_id: str
    student_id: str
    name: str
    total_calories: Optional[int] = None
    is_paid: bool
    content: Optional[Dict[str, Any]] = None
    student_name: Optional[str] = None
    created_at: Optional[datetime] = None


class DietStats(BaseModel):
    total: int
    paid: int
    average_calories: int
