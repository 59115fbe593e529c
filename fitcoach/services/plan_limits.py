"""Trainer plan limits and pricing helpers.

Holds the canonical plan table and the pure functions built on it: limit
checks, fee maths, price formatting and plan recommendations.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from fitcoach.db.base_class import utcnow
from fitcoach.models.profile import TrainerPlan


@dataclass(frozen=True)
class PlanLimits:
    max_students: int  # 0 means unlimited
    ai_credits: int
    fee_percentage: float
    monthly_price: int  # cents
    yearly_price: int  # cents
    features: List[str] = field(default_factory=list)


PLAN_LIMITS: Dict[TrainerPlan, PlanLimits] = {
    TrainerPlan.free: PlanLimits(
        max_students=3,
        ai_credits=0,
        fee_percentage=1.5,
        monthly_price=0,
        yearly_price=0,
        features=["Basic student management", "Simple scheduling"],
    ),
    TrainerPlan.pro: PlanLimits(
        max_students=40,
        ai_credits=50,
        fee_percentage=1.0,
        monthly_price=2900,
        yearly_price=29000,
        features=["Up to 40 students", "50 AI credits/month", "AI diet plans"],
    ),
    TrainerPlan.elite: PlanLimits(
        max_students=0,
        ai_credits=100,
        fee_percentage=0.5,
        monthly_price=4900,
        yearly_price=49000,
        features=["Unlimited students", "100 AI credits/month", "Advanced features"],
    ),
}

PLAN_HIERARCHY = {TrainerPlan.free: 0, TrainerPlan.pro: 1, TrainerPlan.elite: 2}


def get_plan_limits(plan: Union[TrainerPlan, str, None]) -> PlanLimits:
    """Limits for ``plan``; unknown or missing plans fall back to free."""
    try:
        return PLAN_LIMITS[TrainerPlan(plan)]
    except ValueError:
        return PLAN_LIMITS[TrainerPlan.free]


def format_price(price_in_cents: int) -> str:
    """Format cents as Brazilian reais, e.g. ``R$ 1.290,00``."""
    formatted = f"{price_in_cents / 100:,.2f}"
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {formatted}"


def calculate_yearly_savings(monthly_price: int, yearly_price: int) -> int:
    return monthly_price * 12 - yearly_price


def get_plan_display_name(plan: Union[TrainerPlan, str]) -> str:
    names = {
        TrainerPlan.free: "Free Plan",
        TrainerPlan.pro: "Pro Plan",
        TrainerPlan.elite: "Elite Plan",
    }
    try:
        return names[TrainerPlan(plan)]
    except ValueError:
        return "Unknown Plan"


def is_upgrade(current_plan: TrainerPlan, target_plan: TrainerPlan) -> bool:
    return PLAN_HIERARCHY[TrainerPlan(target_plan)] > PLAN_HIERARCHY[TrainerPlan(current_plan)]


def is_downgrade(current_plan: TrainerPlan, target_plan: TrainerPlan) -> bool:
    return PLAN_HIERARCHY[TrainerPlan(target_plan)] < PLAN_HIERARCHY[TrainerPlan(current_plan)]


def calculate_platform_fee(amount: int, fee_percentage: float) -> int:
    # Round half up like the payment processor does
    return int(math.floor(amount * (fee_percentage / 100) + 0.5))


def calculate_net_amount(gross_amount: int, fee_percentage: float) -> int:
    return gross_amount - calculate_platform_fee(gross_amount, fee_percentage)


def get_recommended_plan(student_count: int) -> TrainerPlan:
    if student_count <= 3:
        return TrainerPlan.free
    if student_count <= 40:
        return TrainerPlan.pro
    return TrainerPlan.elite


def get_feature_comparison() -> Dict[str, Dict[str, Union[bool, str]]]:
    return {
        "Student management": {"free": "Up to 3 students", "pro": "Up to 40 students", "elite": "Unlimited"},
        "Workout builder": {"free": True, "pro": True, "elite": True},
        "Scheduling": {"free": True, "pro": True, "elite": True},
        "AI diet plans": {"free": False, "pro": "50 credits/month", "elite": "100 credits/month"},
        "Platform fee": {"free": "1.5%", "pro": "1.0%", "elite": "0.5%"},
        "Priority support": {"free": False, "pro": True, "elite": True},
        "Advanced features": {"free": False, "pro": False, "elite": True},
    }


def get_days_remaining(end_date: datetime, now: Optional[datetime] = None) -> int:
    """Whole days left until ``end_date``, rounded up and never negative."""
    now = now or utcnow()
    days = math.ceil((end_date - now).total_seconds() / 86400)
    return max(0, days)


class PlanLimitsService:
    """Plan checks against a trainer profile (any object with plan/max_students/ai_credits)."""

    @staticmethod
    def get_limits(trainer_profile) -> PlanLimits:
        plan = getattr(trainer_profile, "plan", None) or TrainerPlan.free
        return get_plan_limits(plan)

    @classmethod
    def get_max_students(cls, trainer_profile) -> int:
        return getattr(trainer_profile, "max_students", None) or cls.get_limits(trainer_profile).max_students

    @classmethod
    def can_add_students(cls, trainer_profile, current_student_count: int) -> bool:
        plan = getattr(trainer_profile, "plan", None) or TrainerPlan.free
        if plan == TrainerPlan.elite:
            return True
        return current_student_count < cls.get_max_students(trainer_profile)

    @staticmethod
    def can_use_ai(trainer_profile) -> bool:
        return (getattr(trainer_profile, "ai_credits", None) or 0) > 0
