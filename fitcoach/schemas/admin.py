from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel

from fitcoach.models.profile import TrainerPlan
from fitcoach.schemas.base import BaseSchema


class AdminStats(BaseModel):
    active_trainers: int
    total_students: int
    total_revenue: float
    monthly_revenue: float
    total_sessions: int
    weekly_signups: int
    avg_sessions_per_trainer: float
    system_health: Literal["healthy", "degraded"]


class AdminPayment(BaseModel):
    id: str
    amount: float
    status: str
    method: str
    created_at: datetime
    trainer_name: str


class TrainerProfileSummary(BaseModel):
    plan: TrainerPlan
    max_students: int
    ai_credits: int
    active_until: Optional[datetime] = None


class TrainerSummary(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    trainer_profile: Optional[TrainerProfileSummary] = None
    student_count: int


class TrainerPlanUpdate(BaseModel):
    plan: TrainerPlan


class SystemSettingResponse(BaseSchema):
    id: str
    key: str
    value: str
    description: Optional[str] = None
    updated_at: Optional[datetime] = None


class SystemSettingUpdate(BaseModel):
    value: str


class TrainerList(BaseModel):
    trainers: List[TrainerSummary]
    total: int


class AdminActivity(BaseModel):
    id: str
    type: Literal["trainer_signup", "payment_processed", "session_completed", "system_update"]
    description: str
    created_at: datetime
