from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db, get_service, require_student, require_trainer
from fitcoach.models.user import User
from fitcoach.schemas.dashboard import ActivityItem, StudentDashboard, TrainerStats, UpcomingSession
from fitcoach.services.dashboard import DashboardService

router = APIRouter()


@router.get("/trainer/stats", response_model=TrainerStats)
async def get_trainer_stats(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    dashboard: DashboardService = Depends(get_service("DashboardService")),
):
    """Students, sessions, monthly revenue (cents) and AI credits."""
    return dashboard.get_trainer_stats(db=db, trainer_id=current_user.id)


@router.get("/trainer/upcoming-sessions", response_model=List[UpcomingSession])
async def get_upcoming_sessions(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    dashboard: DashboardService = Depends(get_service("DashboardService")),
):
    return dashboard.get_upcoming_sessions(db=db, trainer_id=current_user.id)


@router.get("/trainer/recent-activity", response_model=List[ActivityItem])
async def get_recent_activity(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    dashboard: DashboardService = Depends(get_service("DashboardService")),
):
    return dashboard.get_recent_activity(db=db, trainer_id=current_user.id)


@router.get("/student", response_model=StudentDashboard)
async def get_student_dashboard(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
    dashboard: DashboardService = Depends(get_service("DashboardService")),
):
    return dashboard.get_student_dashboard(db=db, student_id=current_user.id)
