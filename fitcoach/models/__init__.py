"""Database models."""

# Import all models here to ensure they're recognized by SQLAlchemy
from fitcoach.models.auth import RefreshToken
from fitcoach.models.diet_plan import DietPlan
from fitcoach.models.notification import Notification, SystemSetting
from fitcoach.models.payment import (
    AICreditLedger,
    PaymentIntent,
    PaymentMethod,
    PaymentStatus,
    Subscription,
    SubscriptionStatus,
)
from fitcoach.models.profile import (
    Profile,
    StudentProfile,
    StudentStatus,
    TrainerPlan,
    TrainerProfile,
    UserRole,
)
from fitcoach.models.training_session import SessionStatus, TrainingSession
from fitcoach.models.user import User
from fitcoach.models.workout import Exercise, WorkoutPlan, WorkoutPlanExercise, WorkoutSession

__all__ = [
    "User",
    "Profile",
    "TrainerProfile",
    "StudentProfile",
    "UserRole",
    "TrainerPlan",
    "StudentStatus",
    "RefreshToken",
    "TrainingSession",
    "SessionStatus",
    "DietPlan",
    "Exercise",
    "WorkoutPlan",
    "WorkoutPlanExercise",
    "WorkoutSession",
    "PaymentIntent",
    "PaymentMethod",
    "PaymentStatus",
    "Subscription",
    "SubscriptionStatus",
    "AICreditLedger",
    "Notification",
    "SystemSetting",
]
