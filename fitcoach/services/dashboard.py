"""Trainer and student dashboard service."""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from fitcoach.db.base_class import utcnow
from fitcoach.models.diet_plan import DietPlan
from fitcoach.models.payment import PaymentIntent, PaymentStatus
from fitcoach.models.profile import Profile, StudentProfile, StudentStatus, TrainerProfile
from fitcoach.models.training_session import SessionStatus, TrainingSession
from fitcoach.models.workout import WorkoutPlan
from fitcoach.services.base import full_name, get_or_404, names_by_id
from fitcoach.services.diet_plan import DietPlanService
from fitcoach.services.plan_limits import PlanLimitsService
from fitcoach.services.session import UNKNOWN_STUDENT, session_to_dict
from fitcoach.services.workout import WorkoutService

UPCOMING_DAYS = 7
UPCOMING_LIMIT = 5
ACTIVITY_PER_KIND = 3
ACTIVITY_LIMIT = 10


def month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """First instant of the month containing ``now`` and of the next month."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


class DashboardService:
    @staticmethod
    def get_trainer_stats(db: Session, trainer_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or utcnow()
        trainer_profile = get_or_404(db, TrainerProfile, trainer_id, "Trainer profile not found")

        active_students = (
            db.query(StudentProfile)
            .filter(StudentProfile.trainer_id == trainer_id, StudentProfile.status == StudentStatus.active)
            .count()
        )

        today_start, today_end = day_bounds(now)
        sessions_today = (
            db.query(TrainingSession)
            .filter(
                TrainingSession.trainer_id == trainer_id,
                TrainingSession.scheduled_at >= today_start,
                TrainingSession.scheduled_at < today_end,
            )
            .count()
        )
        total_sessions = db.query(TrainingSession).filter(TrainingSession.trainer_id == trainer_id).count()

        month_start, month_end = month_bounds(now)
        monthly_revenue = (
            db.query(func.coalesce(func.sum(PaymentIntent.amount), 0))
            .filter(
                PaymentIntent.trainer_id == trainer_id,
                PaymentIntent.status == PaymentStatus.succeeded,
                PaymentIntent.created_at >= month_start,
                PaymentIntent.created_at < month_end,
            )
            .scalar()
        )

        return {
            "active_students": active_students,
            "max_students": PlanLimitsService.get_max_students(trainer_profile),
            "sessions_today": sessions_today,
            "total_sessions": total_sessions,
            "monthly_revenue": int(monthly_revenue or 0),
            "ai_credits": trainer_profile.ai_credits or 0,
        }

    @staticmethod
    def get_upcoming_sessions(db: Session, trainer_id: str, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        now = now or utcnow()
        sessions = (
            db.query(TrainingSession)
            .filter(
                TrainingSession.trainer_id == trainer_id,
                TrainingSession.status == SessionStatus.scheduled,
                TrainingSession.scheduled_at >= now,
                TrainingSession.scheduled_at <= now + timedelta(days=UPCOMING_DAYS),
            )
            .order_by(TrainingSession.scheduled_at.asc())
            .limit(UPCOMING_LIMIT)
            .all()
        )
        names = names_by_id(db, (s.student_id for s in sessions), UNKNOWN_STUDENT)
        return [
            {
                "id": s.id,
                "student_name": names.get(s.student_id, UNKNOWN_STUDENT),
                "scheduled_at": s.scheduled_at,
                "duration_minutes": s.duration_minutes,
                "status": SessionStatus(s.status).value,
            }
            for s in sessions
        ]

    @staticmethod
    def get_recent_activity(db: Session, trainer_id: str) -> List[Dict[str, Any]]:
        """Latest completed sessions, new students, diet plans and assigned workouts, newest first."""
        completed = (
            db.query(TrainingSession)
            .filter(TrainingSession.trainer_id == trainer_id, TrainingSession.status == SessionStatus.completed)
            .order_by(TrainingSession.updated_at.desc())
            .limit(ACTIVITY_PER_KIND)
            .all()
        )
        students = (
            db.query(StudentProfile)
            .filter(StudentProfile.trainer_id == trainer_id)
            .order_by(StudentProfile.created_at.desc())
            .limit(ACTIVITY_PER_KIND)
            .all()
        )
        diets = (
            db.query(DietPlan)
            .filter(DietPlan.trainer_id == trainer_id)
            .order_by(DietPlan.created_at.desc())
            .limit(ACTIVITY_PER_KIND)
            .all()
        )
        workouts = (
            db.query(WorkoutPlan)
            .filter(
                WorkoutPlan.trainer_id == trainer_id,
                WorkoutPlan.is_template == False,
                WorkoutPlan.student_id.isnot(None),
            )
            .order_by(WorkoutPlan.created_at.desc())
            .limit(ACTIVITY_PER_KIND)
            .all()
        )

        ids = [s.student_id for s in completed] + [s.id for s in students]
        ids += [d.student_id for d in diets] + [w.student_id for w in workouts]
        names = names_by_id(db, ids, UNKNOWN_STUDENT)

        activity = []
        for s in completed:
            activity.append({
                "id": f"session-{s.id}",
                "type": "session_completed",
                "description": f"Session with {names.get(s.student_id, UNKNOWN_STUDENT)} completed",
                "created_at": s.updated_at or s.scheduled_at,
            })
        for s in students:
            activity.append({
                "id": f"student-{s.id}",
                "type": "student_added",
                "description": f"New student: {names.get(s.id, UNKNOWN_STUDENT)}",
                "created_at": s.created_at,
            })
        for d in diets:
            activity.append({
                "id": f"diet-{d.id}",
                "type": "diet_created",
                "description": f"Diet plan '{d.name}' created for {names.get(d.student_id, UNKNOWN_STUDENT)}",
                "created_at": d.created_at,
            })
        for w in workouts:
            activity.append({
                "id": f"workout-{w.id}",
                "type": "workout_assigned",
                "description": f"Workout '{w.name}' assigned to {names.get(w.student_id, UNKNOWN_STUDENT)}",
                "created_at": w.created_at,
            })

        activity.sort(key=lambda item: item["created_at"], reverse=True)
        return activity[:ACTIVITY_LIMIT]

    @staticmethod
    def get_student_dashboard(db: Session, student_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or utcnow()
        profile = db.query(Profile).filter(Profile.id == student_id).first()
        student_profile = db.query(StudentProfile).filter(StudentProfile.id == student_id).first()
        if not profile or not student_profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Student profile not found",
            )

        trainer_name = None
        if student_profile.trainer_id:
            trainer = db.query(Profile).filter(Profile.id == student_profile.trainer_id).first()
            trainer_name = full_name(trainer) or None

        sessions = (
            db.query(TrainingSession)
            .filter(
                TrainingSession.student_id == student_id,
                TrainingSession.status == SessionStatus.scheduled,
                TrainingSession.scheduled_at >= now,
            )
            .order_by(TrainingSession.scheduled_at.asc())
            .limit(UPCOMING_LIMIT)
            .all()
        )
        student_name = full_name(profile, UNKNOWN_STUDENT)

        return {
            "profile": profile,
            "student_profile": student_profile,
            "trainer_name": trainer_name,
            "upcoming_sessions": [session_to_dict(s, student_name) for s in sessions],
            "diet_plans": DietPlanService.list_student_diet_plans(db, student_id),
            "workout_plans": WorkoutService.get_student_workout_plans(db, student_id),
        }
