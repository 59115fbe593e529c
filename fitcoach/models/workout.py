from sqlalchemy import JSON, Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from fitcoach.db.base_class import Base, generate_id, utcnow


class Exercise(Base):
    __tablename__ = "exercises"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    muscle_groups = Column(JSON, nullable=False, default=list)
    equipment = Column(String(100), nullable=False, default="")
    difficulty_level = Column(Integer, nullable=False, default=1)
    instructions = Column(Text, nullable=False, default="")
    video_url = Column(String(255), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)


class WorkoutPlan(Base):
    __tablename__ = "workout_plans"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), ForeignKey("student_profiles.id", ondelete="SET NULL"), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    difficulty_level = Column(Integer, nullable=True)
    estimated_duration_minutes = Column(Integer, nullable=False, default=60)
    muscle_groups = Column(JSON, nullable=False, default=list)
    is_template = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    exercises = relationship(
        "WorkoutPlanExercise",
        back_populates="workout_plan",
        order_by="WorkoutPlanExercise.order_in_workout",
        cascade="all, delete-orphan",
    )


class WorkoutPlanExercise(Base):
    __tablename__ = "workout_plan_exercises"

    id = Column(String(64), primary_key=True, default=generate_id)
    workout_plan_id = Column(String(64), ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(String(64), ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False)
    order_in_workout = Column(Integer, nullable=False, default=1)
    target_sets = Column(Integer, nullable=False, default=3)
    target_reps = Column(String(20), nullable=False, default="10")
    target_weight_kg = Column(Float, nullable=True)
    rest_seconds = Column(Integer, nullable=False, default=60)
    notes = Column(Text, nullable=True)

    workout_plan = relationship("WorkoutPlan", back_populates="exercises")
    exercise = relationship("Exercise")


class WorkoutSession(Base):
    __tablename__ = "workout_sessions"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), ForeignKey("student_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    workout_plan_id = Column(String(64), ForeignKey("workout_plans.id", ondelete="CASCADE"), nullable=False)
    scheduled_date = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="scheduled")
    duration_minutes = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    workout_plan = relationship("WorkoutPlan")
