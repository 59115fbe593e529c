"""Payment service.

Payment intents, subscriptions, plan changes and AI credit accounting for
trainers. Amounts are integer cents.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from fitcoach.core.config import settings
from fitcoach.db.base_class import utcnow
from fitcoach.models.payment import (
    AICreditLedger,
    PaymentIntent,
    PaymentMethod,
    PaymentStatus,
    Subscription,
    SubscriptionStatus,
)
from fitcoach.models.profile import TrainerPlan, TrainerProfile
from fitcoach.schemas.payment import PaymentIntentCreate, SubscriptionCreate
from fitcoach.services.base import get_or_404, names_by_id, transaction
from fitcoach.services.plan_limits import (
    PLAN_LIMITS,
    PlanLimitsService,
    calculate_net_amount,
    calculate_yearly_savings,
    format_price,
    get_days_remaining,
    get_feature_comparison,
    get_plan_display_name,
    get_plan_limits,
    get_recommended_plan,
    is_downgrade,
    is_upgrade,
)
from fitcoach.services.student import StudentService
from fitcoach.utils.logger import payment_logger

PLAN_PERIOD_DAYS = 30
BILLING_PERIOD_DAYS = {"monthly": 30, "yearly": 365}
AI_CREDIT_TYPE_PURCHASE = "purchase"


def apply_plan(trainer_profile: TrainerProfile, plan: TrainerPlan, active_until: Optional[datetime] = None) -> None:
    """Set the plan and reset limits and credits to the plan's allowance."""
    limits = get_plan_limits(plan)
    trainer_profile.plan = plan
    trainer_profile.max_students = limits.max_students
    trainer_profile.ai_credits = limits.ai_credits
    trainer_profile.active_until = active_until


def payment_to_dict(payment: PaymentIntent, student_name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": payment.id,
        "trainer_id": payment.trainer_id,
        "student_id": payment.student_id,
        "amount": payment.amount,
        "currency": payment.currency,
        "method": payment.method,
        "fee_percent": payment.fee_percent,
        "net_amount": calculate_net_amount(payment.amount, payment.fee_percent or 0),
        "status": payment.status,
        "description": payment.description,
        "created_at": payment.created_at,
        "student_name": student_name,
    }


class PaymentService:
    @staticmethod
    def _get_trainer_profile(db: Session, trainer_id: str) -> TrainerProfile:
        return get_or_404(db, TrainerProfile, trainer_id, "Trainer profile not found")

    # Payment intents

    @staticmethod
    def list_payments(db: Session, trainer_id: str) -> List[Dict[str, Any]]:
        payments = (
            db.query(PaymentIntent)
            .filter(PaymentIntent.trainer_id == trainer_id)
            .order_by(PaymentIntent.created_at.desc())
            .all()
        )
        names = names_by_id(db, (p.student_id for p in payments))
        return [payment_to_dict(p, names.get(p.student_id)) for p in payments]

    @classmethod
    def create_payment_intent(
        cls, db: Session, trainer_id: str, payment_data: PaymentIntentCreate
    ) -> Dict[str, Any]:
        """Create a pending payment charged with the trainer's platform fee."""
        trainer_profile = cls._get_trainer_profile(db, trainer_id)
        payment = PaymentIntent(
            trainer_id=trainer_id,
            student_id=payment_data.student_id,
            amount=payment_data.amount,
            currency=settings.CURRENCY,
            method=payment_data.method,
            fee_percent=PlanLimitsService.get_limits(trainer_profile).fee_percentage,
            status=PaymentStatus.pending,
            description=payment_data.description,
        )
        with transaction(db, "creating payment intent"):
            db.add(payment)
        db.refresh(payment)

        payment_logger.info("Payment intent created", "INTENT", payment_id=payment.id, amount=payment.amount)
        return payment_to_dict(payment)

    @staticmethod
    def update_payment_status(
        db: Session, trainer_id: str, payment_id: str, new_status: PaymentStatus
    ) -> Dict[str, Any]:
        payment = (
            db.query(PaymentIntent)
            .filter(PaymentIntent.id == payment_id, PaymentIntent.trainer_id == trainer_id)
            .first()
        )
        if not payment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Payment not found",
            )
        if payment.status != PaymentStatus.pending or new_status == PaymentStatus.pending:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot change payment status from {PaymentStatus(payment.status).value} to {new_status.value}",
            )

        with transaction(db, "updating payment status"):
            payment.status = new_status
        db.refresh(payment)

        payment_logger.info("Payment status updated", "INTENT", payment_id=payment_id, status=new_status.value)
        return payment_to_dict(payment)

    # Subscriptions

    @staticmethod
    def get_subscription(db: Session, trainer_id: str) -> Optional[Subscription]:
        return (
            db.query(Subscription)
            .filter(
                Subscription.trainer_id == trainer_id,
                Subscription.status.in_([SubscriptionStatus.active, SubscriptionStatus.trialing]),
            )
            .order_by(Subscription.created_at.desc())
            .first()
        )

    @classmethod
    def create_subscription(
        cls, db: Session, trainer_id: str, subscription_data: SubscriptionCreate
    ) -> Subscription:
        """
        Subscribe a trainer to a paid plan.

        The plan price is charged immediately and the trainer's plan and limits
        are switched for the length of the billing period. Any previous
        active subscription is canceled.
        """
        if subscription_data.plan == TrainerPlan.free:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="The free plan does not need a subscription",
            )

        trainer_profile = cls._get_trainer_profile(db, trainer_id)
        limits = get_plan_limits(subscription_data.plan)
        cycle = subscription_data.billing_cycle
        price = limits.monthly_price if cycle == "monthly" else limits.yearly_price

        now = utcnow()
        period_end = now + timedelta(days=BILLING_PERIOD_DAYS[cycle])

        payment_logger.info(
            f"Subscribing to {subscription_data.plan.value}", "SUBSCRIPTION",
            trainer_id=trainer_id, cycle=cycle, price=price,
        )

        with transaction(db, "creating subscription"):
            db.query(Subscription).filter(
                Subscription.trainer_id == trainer_id,
                Subscription.status.in_([SubscriptionStatus.active, SubscriptionStatus.trialing]),
            ).update({"status": SubscriptionStatus.canceled}, synchronize_session=False)

            db.add(PaymentIntent(
                trainer_id=trainer_id,
                amount=price,
                currency=settings.CURRENCY,
                method=PaymentMethod.credit_card,
                fee_percent=0,
                status=PaymentStatus.succeeded,
                description=f"{subscription_data.plan.value} plan ({cycle})",
            ))

            subscription = Subscription(
                trainer_id=trainer_id,
                plan=subscription_data.plan,
                billing_cycle=cycle,
                status=SubscriptionStatus.active,
                current_period_start=now,
                current_period_end=period_end,
                cancel_at_period_end=False,
            )
            db.add(subscription)
            apply_plan(trainer_profile, subscription_data.plan, period_end)

        db.refresh(subscription)
        payment_logger.success("Subscription active", "SUBSCRIPTION", subscription_id=subscription.id)
        return subscription

    @classmethod
    def cancel_subscription(cls, db: Session, trainer_id: str) -> Subscription:
        subscription = cls.get_subscription(db, trainer_id)
        if not subscription:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No active subscription",
            )
        with transaction(db, "canceling subscription"):
            subscription.status = SubscriptionStatus.canceled
            subscription.cancel_at_period_end = True
        db.refresh(subscription)
        payment_logger.info("Subscription canceled", "SUBSCRIPTION", subscription_id=subscription.id)
        return subscription

    # Plans and limits

    @staticmethod
    def get_plan_catalog() -> Dict[str, Any]:
        """Every plan with its formatted prices and yearly savings, plus the feature comparison table."""
        plans = []
        for plan, limits in PLAN_LIMITS.items():
            savings = calculate_yearly_savings(limits.monthly_price, limits.yearly_price)
            plans.append({
                "plan": plan,
                "name": get_plan_display_name(plan),
                "monthly_price": limits.monthly_price,
                "yearly_price": limits.yearly_price,
                "monthly_price_text": format_price(limits.monthly_price),
                "yearly_price_text": format_price(limits.yearly_price),
                "yearly_savings": savings,
                "yearly_savings_text": format_price(savings),
                "max_students": limits.max_students,
                "ai_credits": limits.ai_credits,
                "fee_percentage": limits.fee_percentage,
                "features": list(limits.features),
            })
        return {"plans": plans, "comparison": get_feature_comparison()}

    @classmethod
    def update_trainer_plan(cls, db: Session, trainer_id: str, plan: TrainerPlan) -> TrainerProfile:
        trainer_profile = cls._get_trainer_profile(db, trainer_id)
        active_until = None if plan == TrainerPlan.free else utcnow() + timedelta(days=PLAN_PERIOD_DAYS)
        with transaction(db, "updating trainer plan"):
            apply_plan(trainer_profile, plan, active_until)
        db.refresh(trainer_profile)
        payment_logger.info("Trainer plan updated", "PLAN", trainer_id=trainer_id, plan=plan.value)
        return trainer_profile

    @classmethod
    def check_plan_limits(cls, db: Session, trainer_id: str) -> Dict[str, Any]:
        trainer_profile = cls._get_trainer_profile(db, trainer_id)
        current_students = StudentService.count_active_students(db, trainer_id)
        limits = PlanLimitsService.get_limits(trainer_profile)
        plan = TrainerPlan(trainer_profile.plan or TrainerPlan.free)
        recommended = get_recommended_plan(current_students)
        active_until = trainer_profile.active_until
        return {
            "plan": plan,
            "max_students": PlanLimitsService.get_max_students(trainer_profile),
            "current_students": current_students,
            "can_add_students": PlanLimitsService.can_add_students(trainer_profile, current_students),
            "ai_credits": trainer_profile.ai_credits or 0,
            "can_use_ai": PlanLimitsService.can_use_ai(trainer_profile),
            "fee_percentage": limits.fee_percentage,
            "recommended_plan": recommended,
            "upgrade_recommended": is_upgrade(plan, recommended),
            "downgrade_possible": is_downgrade(plan, recommended),
            "active_until": active_until,
            "days_remaining": get_days_remaining(active_until) if active_until else None,
        }

    # AI credits

    @classmethod
    def get_ai_usage(cls, db: Session, trainer_id: str) -> Dict[str, int]:
        trainer_profile = cls._get_trainer_profile(db, trainer_id)
        used = (
            db.query(func.coalesce(func.sum(AICreditLedger.amount), 0))
            .filter(AICreditLedger.trainer_id == trainer_id, AICreditLedger.amount < 0)
            .scalar()
        )
        purchased = (
            db.query(func.coalesce(func.sum(AICreditLedger.amount), 0))
            .filter(AICreditLedger.trainer_id == trainer_id, AICreditLedger.amount > 0)
            .scalar()
        )
        return {
            "credits_remaining": trainer_profile.ai_credits or 0,
            "credits_used": abs(int(used or 0)),
            "credits_purchased": int(purchased or 0),
        }

    @classmethod
    def add_ai_credits(cls, db: Session, trainer_id: str, amount: int) -> TrainerProfile:
        if amount <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Credit amount must be positive",
            )
        trainer_profile = cls._get_trainer_profile(db, trainer_id)
        with transaction(db, "adding AI credits"):
            trainer_profile.ai_credits = (trainer_profile.ai_credits or 0) + amount
            db.add(AICreditLedger(trainer_id=trainer_id, amount=amount, type=AI_CREDIT_TYPE_PURCHASE))
        db.refresh(trainer_profile)
        payment_logger.success("AI credits added", "CREDITS", trainer_id=trainer_id, amount=amount)
        return trainer_profile
