"""Workout service.

Exercises (public library plus each trainer's own), workout plans built
from them, template assignment to students, and workout sessions.
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from fitcoach.db.base_class import to_naive_utc, utcnow
from fitcoach.models.profile import StudentProfile
from fitcoach.models.workout import Exercise, WorkoutPlan, WorkoutPlanExercise, WorkoutSession
from fitcoach.schemas.workout import (
    ExerciseCreate,
    WorkoutPlanCreate,
    WorkoutPlanExerciseCreate,
    WorkoutSessionComplete,
    WorkoutSessionCreate,
)
from fitcoach.services.base import names_by_id, transaction
from fitcoach.utils.logger import workout_logger
from fitcoach.utils.workout import (
    calculate_workout_duration,
    extract_muscle_groups,
    format_workout_duration,
    get_difficulty_text,
    validate_exercise,
    validate_workout_plan,
)

DEFAULT_PLAN_DURATION_MINUTES = 60


def _validation_error(errors: List[str]) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=errors)


def workout_plan_to_dict(plan: WorkoutPlan) -> Dict[str, Any]:
    """Plan fields plus display text; muscle groups fall back to those of the plan's exercises."""
    exercises = list(plan.exercises)
    duration = plan.estimated_duration_minutes or 0
    return {
        "id": plan.id,
        "trainer_id": plan.trainer_id,
        "student_id": plan.student_id,
        "name": plan.name,
        "description": plan.description,
        "difficulty_level": plan.difficulty_level,
        "difficulty_text": get_difficulty_text(plan.difficulty_level),
        "estimated_duration_minutes": duration,
        "duration_text": format_workout_duration(duration),
        "muscle_groups": list(plan.muscle_groups or []) or extract_muscle_groups(exercises),
        "is_template": plan.is_template,
        "created_at": plan.created_at,
        "exercises": exercises,
    }


def workout_session_to_dict(
    session: WorkoutSession, student_name: str = "", plan_name: Optional[str] = None
) -> Dict[str, Any]:
    return {
        "id": session.id,
        "trainer_id": session.trainer_id,
        "student_id": session.student_id,
        "workout_plan_id": session.workout_plan_id,
        "scheduled_date": session.scheduled_date,
        "completed_at": session.completed_at,
        "status": session.status,
        "duration_minutes": session.duration_minutes,
        "notes": session.notes,
        "rating": session.rating,
        "workout_plan_name": plan_name,
        "student_name": student_name,
    }


class WorkoutService:
    """Service class for exercises, workout plans and workout sessions."""

    # Exercises

    @staticmethod
    def get_exercises(db: Session, trainer_id: Optional[str] = None) -> List[Exercise]:
        """Public exercises plus the trainer's own, sorted by name."""
        query = db.query(Exercise)
        if trainer_id:
            query = query.filter(or_(Exercise.is_public == True, Exercise.trainer_id == trainer_id))
        else:
            query = query.filter(Exercise.is_public == True)
        return query.order_by(Exercise.name).all()

    @staticmethod
    def create_exercise(db: Session, trainer_id: str, exercise_data: ExerciseCreate) -> Exercise:
        errors = validate_exercise(exercise_data)
        if errors:
            workout_logger.warning("Exercise rejected", "EXERCISE", errors=errors)
            raise _validation_error(errors)

        exercise = Exercise(trainer_id=trainer_id, **exercise_data.model_dump())
        with transaction(db, "creating exercise"):
            db.add(exercise)
        db.refresh(exercise)
        return exercise

    @staticmethod
    def _get_visible_exercise(db: Session, trainer_id: str, exercise_id: str) -> Exercise:
        exercise = (
            db.query(Exercise)
            .filter(
                Exercise.id == exercise_id,
                or_(Exercise.is_public == True, Exercise.trainer_id == trainer_id),
            )
            .first()
        )
        if not exercise:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Exercise {exercise_id} not found",
            )
        return exercise

    @staticmethod
    def _get_student(db: Session, trainer_id: str, student_id: str) -> StudentProfile:
        student = (
            db.query(StudentProfile)
            .filter(StudentProfile.id == student_id, StudentProfile.trainer_id == trainer_id)
            .first()
        )
        if not student:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Student not found",
            )
        return student

    # Workout plans

    @staticmethod
    def get_workout_plans(db: Session, trainer_id: str) -> List[Dict[str, Any]]:
        plans = (
            db.query(WorkoutPlan)
            .options(selectinload(WorkoutPlan.exercises).selectinload(WorkoutPlanExercise.exercise))
            .filter(WorkoutPlan.trainer_id == trainer_id)
            .order_by(WorkoutPlan.created_at.desc())
            .all()
        )
        return [workout_plan_to_dict(p) for p in plans]

    @staticmethod
    def get_student_workout_plans(db: Session, student_id: str) -> List[Dict[str, Any]]:
        plans = (
            db.query(WorkoutPlan)
            .options(selectinload(WorkoutPlan.exercises).selectinload(WorkoutPlanExercise.exercise))
            .filter(WorkoutPlan.student_id == student_id)
            .order_by(WorkoutPlan.created_at.desc())
            .all()
        )
        return [workout_plan_to_dict(p) for p in plans]

    @staticmethod
    def _get_workout_plan(db: Session, plan_id: str, trainer_id: Optional[str] = None) -> WorkoutPlan:
        query = db.query(WorkoutPlan).filter(WorkoutPlan.id == plan_id)
        if trainer_id:
            query = query.filter(WorkoutPlan.trainer_id == trainer_id)
        plan = query.first()
        if not plan:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Workout plan not found",
            )
        return plan

    @classmethod
    def get_workout_plan(cls, db: Session, plan_id: str, trainer_id: Optional[str] = None) -> Dict[str, Any]:
        return workout_plan_to_dict(cls._get_workout_plan(db, plan_id, trainer_id))

    @classmethod
    def _build_plan_exercise(
        cls, db: Session, trainer_id: str, data: WorkoutPlanExerciseCreate, default_order: int
    ) -> WorkoutPlanExercise:
        cls._get_visible_exercise(db, trainer_id, data.exercise_id)
        return WorkoutPlanExercise(
            exercise_id=data.exercise_id,
            order_in_workout=data.order_in_workout or default_order,
            target_sets=data.target_sets,
            target_reps=data.target_reps,
            target_weight_kg=data.target_weight_kg,
            rest_seconds=data.rest_seconds,
            notes=data.notes,
        )

    @classmethod
    def create_workout_plan(cls, db: Session, trainer_id: str, plan_data: WorkoutPlanCreate) -> Dict[str, Any]:
        errors = validate_workout_plan(plan_data)
        if errors:
            workout_logger.warning("Workout plan rejected", "PLAN", errors=errors)
            raise _validation_error(errors)

        if plan_data.student_id:
            cls._get_student(db, trainer_id, plan_data.student_id)

        plan_exercises = [
            cls._build_plan_exercise(db, trainer_id, item, index + 1)
            for index, item in enumerate(plan_data.exercises)
        ]
        duration = (
            plan_data.estimated_duration_minutes
            or calculate_workout_duration(plan_exercises)
            or DEFAULT_PLAN_DURATION_MINUTES
        )

        plan = WorkoutPlan(
            trainer_id=trainer_id,
            student_id=plan_data.student_id,
            name=plan_data.name.strip(),
            description=plan_data.description,
            difficulty_level=plan_data.difficulty_level,
            estimated_duration_minutes=duration,
            muscle_groups=list(plan_data.muscle_groups),
            is_template=plan_data.is_template,
        )
        plan.exercises = plan_exercises

        with transaction(db, "creating workout plan"):
            db.add(plan)
        db.refresh(plan)

        workout_logger.success("Workout plan created", "PLAN", plan_id=plan.id, exercises=len(plan_exercises))
        return workout_plan_to_dict(plan)

    @classmethod
    def add_exercise_to_plan(
        cls, db: Session, trainer_id: str, plan_id: str, exercise_data: WorkoutPlanExerciseCreate
    ) -> Dict[str, Any]:
        plan = cls._get_workout_plan(db, plan_id, trainer_id)
        plan_exercise = cls._build_plan_exercise(db, trainer_id, exercise_data, len(plan.exercises) + 1)

        with transaction(db, "adding exercise to workout plan"):
            plan.exercises.append(plan_exercise)
        db.refresh(plan)
        return workout_plan_to_dict(plan)

    @classmethod
    def assign_workout_to_student(
        cls, db: Session, trainer_id: str, template_id: str, student_id: str
    ) -> Dict[str, Any]:
        """Copy a plan and its exercises to a student. The copy is never a template."""
        template = cls._get_workout_plan(db, template_id, trainer_id)
        cls._get_student(db, trainer_id, student_id)

        copy = WorkoutPlan(
            trainer_id=trainer_id,
            student_id=student_id,
            name=template.name,
            description=template.description,
            difficulty_level=template.difficulty_level,
            estimated_duration_minutes=template.estimated_duration_minutes,
            muscle_groups=list(template.muscle_groups or []),
            is_template=False,
        )
        copy.exercises = [
            WorkoutPlanExercise(
                exercise_id=item.exercise_id,
                order_in_workout=item.order_in_workout,
                target_sets=item.target_sets,
                target_reps=item.target_reps,
                target_weight_kg=item.target_weight_kg,
                rest_seconds=item.rest_seconds,
                notes=item.notes,
            )
            for item in template.exercises
        ]

        with transaction(db, "assigning workout plan"):
            db.add(copy)
        db.refresh(copy)

        workout_logger.info("Workout assigned", "ASSIGN", template_id=template_id, student_id=student_id)
        return workout_plan_to_dict(copy)

    # Workout sessions

    @staticmethod
    def get_workout_sessions(db: Session, trainer_id: str) -> List[Dict[str, Any]]:
        sessions = (
            db.query(WorkoutSession)
            .options(selectinload(WorkoutSession.workout_plan))
            .filter(WorkoutSession.trainer_id == trainer_id)
            .order_by(WorkoutSession.scheduled_date.desc())
            .all()
        )
        names = names_by_id(db, (s.student_id for s in sessions))
        return [
            workout_session_to_dict(
                s, names.get(s.student_id, ""), s.workout_plan.name if s.workout_plan else None
            )
            for s in sessions
        ]

    @classmethod
    def create_workout_session(
        cls, db: Session, trainer_id: str, session_data: WorkoutSessionCreate
    ) -> Dict[str, Any]:
        plan = cls._get_workout_plan(db, session_data.workout_plan_id, trainer_id)
        cls._get_student(db, trainer_id, session_data.student_id)

        session = WorkoutSession(
            trainer_id=trainer_id,
            student_id=session_data.student_id,
            workout_plan_id=plan.id,
            scheduled_date=to_naive_utc(session_data.scheduled_date),
            status="scheduled",
            notes=session_data.notes,
        )
        with transaction(db, "creating workout session"):
            db.add(session)
        db.refresh(session)

        names = names_by_id(db, [session.student_id])
        return workout_session_to_dict(session, names.get(session.student_id, ""), plan.name)

    @staticmethod
    def complete_workout_session(
        db: Session, trainer_id: str, session_id: str, completion: WorkoutSessionComplete
    ) -> Dict[str, Any]:
        session = (
            db.query(WorkoutSession)
            .filter(WorkoutSession.id == session_id, WorkoutSession.trainer_id == trainer_id)
            .first()
        )
        if not session:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Workout session not found",
            )
        if session.status != "scheduled":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Workout session is already {session.status}",
            )

        with transaction(db, "completing workout session"):
            session.status = "completed"
            session.completed_at = utcnow()
            session.rating = completion.rating
            if completion.duration_minutes is not None:
                session.duration_minutes = completion.duration_minutes
            if completion.notes is not None:
                session.notes = completion.notes
        db.refresh(session)

        names = names_by_id(db, [session.student_id])
        plan_name = session.workout_plan.name if session.workout_plan else None
        return workout_session_to_dict(session, names.get(session.student_id, ""), plan_name)
