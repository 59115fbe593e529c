"""Workout API endpoints.

Exercise library, workout plans and templates, and workout sessions.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db, get_service, require_student, require_trainer
from fitcoach.models.user import User
from fitcoach.schemas.workout import (
    AssignWorkoutRequest,
    ExerciseCreate,
    ExerciseResponse,
    WorkoutPlanCreate,
    WorkoutPlanExerciseCreate,
    WorkoutPlanResponse,
    WorkoutSessionComplete,
    WorkoutSessionCreate,
    WorkoutSessionResponse,
)
from fitcoach.services.workout import WorkoutService

router = APIRouter()


@router.get("/exercises", response_model=List[ExerciseResponse])
async def get_exercises(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    """Public exercises plus the trainer's own."""
    return workouts.get_exercises(db=db, trainer_id=current_user.id)


@router.post("/exercises", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
async def create_exercise(
    exercise_data: ExerciseCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    return workouts.create_exercise(db=db, trainer_id=current_user.id, exercise_data=exercise_data)


@router.get("/plans", response_model=List[WorkoutPlanResponse])
async def get_workout_plans(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    return workouts.get_workout_plans(db=db, trainer_id=current_user.id)


@router.post("/plans", response_model=WorkoutPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_workout_plan(
    plan_data: WorkoutPlanCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    """Create a plan (or template) with its exercises."""
    return workouts.create_workout_plan(db=db, trainer_id=current_user.id, plan_data=plan_data)


@router.get("/plans/mine", response_model=List[WorkoutPlanResponse])
async def get_my_workout_plans(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    return workouts.get_student_workout_plans(db=db, student_id=current_user.id)


@router.get("/plans/{plan_id}", response_model=WorkoutPlanResponse)
async def get_workout_plan(
    plan_id: str,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    return workouts.get_workout_plan(db=db, plan_id=plan_id, trainer_id=current_user.id)


@router.post("/plans/{plan_id}/exercises", response_model=WorkoutPlanResponse)
async def add_exercise_to_plan(
    plan_id: str,
    exercise_data: WorkoutPlanExerciseCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    return workouts.add_exercise_to_plan(
        db=db, trainer_id=current_user.id, plan_id=plan_id, exercise_data=exercise_data
    )


@router.post("/plans/{plan_id}/assign", response_model=WorkoutPlanResponse, status_code=status.HTTP_201_CREATED)
async def assign_workout_to_student(
    plan_id: str,
    assignment: AssignWorkoutRequest,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    """Copy a template to a student."""
    return workouts.assign_workout_to_student(
        db=db, trainer_id=current_user.id, template_id=plan_id, student_id=assignment.student_id
    )


@router.get("/sessions", response_model=List[WorkoutSessionResponse])
async def get_workout_sessions(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    return workouts.get_workout_sessions(db=db, trainer_id=current_user.id)


@router.post("/sessions", response_model=WorkoutSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_workout_session(
    session_data: WorkoutSessionCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    return workouts.create_workout_session(db=db, trainer_id=current_user.id, session_data=session_data)


@router.post("/sessions/{session_id}/complete", response_model=WorkoutSessionResponse)
async def complete_workout_session(
    session_id: str,
    completion: WorkoutSessionComplete,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    workouts: WorkoutService = Depends(get_service("WorkoutService")),
):
    """Mark a scheduled workout session as completed, with an optional rating."""
    return workouts.complete_workout_session(
        db=db, trainer_id=current_user.id, session_id=session_id, completion=completion
    )
