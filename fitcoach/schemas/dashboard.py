from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from fitcoach.schemas.diet_plan import DietPlanResponse
from fitcoach.schemas.profile import ProfileResponse, StudentProfileResponse
from fitcoach.schemas.session import SessionResponse
from fitcoach.schemas.workout import WorkoutPlanResponse


class TrainerStats(BaseModel):
    active_students: int
    max_students: int
    sessions_today: int
    total_sessions: int
    monthly_revenue: float
    ai_credits: int


class UpcomingSession(BaseModel):
    id: str
    student_name: str
    scheduled_at: datetime
    duration_minutes: int
    status: str


class ActivityItem(BaseModel):
    id: str
    type: str
    description: str
    created_at: datetime


class StudentDashboard(BaseModel):
    profile: ProfileResponse
    student_profile: StudentProfileResponse
    trainer_name: Optional[str] = None
    upcoming_sessions: List[SessionResponse] = []
    diet_plans: List[DietPlanResponse] = []
    workout_plans: List[WorkoutPlanResponse] = []
