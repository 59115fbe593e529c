from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from fitcoach.schemas.base import BaseSchema


class ExerciseCreate(BaseModel):
    """Exercise payload; business validation runs in the service so every problem is reported at once."""

    name: str
    description: str = ""
    muscle_groups: List[str] = []
    equipment: str = ""
    difficulty_level: int = 1
    instructions: str = ""
    video_url: Optional[str] = None
    is_public: bool = False


class ExerciseResponse(BaseSchema):
    id: str
    trainer_id: Optional[str] = None
    name: str
    description: str
    muscle_groups: List[str]
    equipment: str
    difficulty_level: int
    instructions: str
    video_url: Optional[str] = None
    is_public: bool


class WorkoutPlanExerciseCreate(BaseModel):
    exercise_id: str
    order_in_workout: Optional[int] = None
    target_sets: int = Field(3, ge=1, le=20)
    target_reps: str = "10"
    target_weight_kg: Optional[float] = Field(None, ge=0)
    rest_seconds: int = Field(60, ge=0, le=900)
    notes: Optional[str] = None


class WorkoutPlanExerciseResponse(BaseSchema):
    id: str
    exercise_id: str
    order_in_workout: int
    target_sets: int
    target_reps: str
    target_weight_kg: Optional[float] = None
    rest_seconds: int
    notes: Optional[str] = None
    exercise: Optional[ExerciseResponse] = None


class WorkoutPlanCreate(BaseModel):
    name: str
    description: str = ""
    difficulty_level: int = 1
    estimated_duration_minutes: Optional[int] = None
    muscle_groups: List[str] = []
    is_template: bool = True
    student_id: Optional[str] = None
    exercises: List[WorkoutPlanExerciseCreate] = []


class WorkoutPlanResponse(BaseSchema):
    id: str
    trainer_id: str
    student_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    difficulty_level: Optional[int] = None
    difficulty_text: str = "Undefined"
    estimated_duration_minutes: int
    duration_text: str = ""
    muscle_groups: List[str]
    is_template: bool
    created_at: Optional[datetime] = None
    exercises: List[WorkoutPlanExerciseResponse] = []


class AssignWorkoutRequest(BaseModel):
    student_id: str


class WorkoutSessionCreate(BaseModel):
    student_id: str
    workout_plan_id: str
    scheduled_date: datetime
    notes: Optional[str] = None


class WorkoutSessionComplete(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    duration_minutes: Optional[int] = Field(None, ge=1, le=600)
    notes: Optional[str] = None


class WorkoutSessionResponse(BaseSchema):
    id: str
    trainer_id: str
    student_id: str
    workout_plan_id: str
    scheduled_date: datetime
    completed_at: Optional[datetime] = None
    status: str
    duration_minutes: Optional[int] = None
    notes: Optional[str] = None
    rating: Optional[int] = None
    workout_plan_name: Optional[str] = None
    student_name: Optional[str] = None
