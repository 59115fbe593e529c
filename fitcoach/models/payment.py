import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String

from fitcoach.db.base_class import Base, generate_id, utcnow
from fitcoach.models.profile import TrainerPlan


class PaymentMethod(str, enum.Enum):
    credit_card = "credit_card"
    pix = "pix"
    bank_transfer = "bank_transfer"


class PaymentStatus(str, enum.Enum):
    pending = "pending"
    succeeded = "succeeded"
    failed = "failed"
    cancelled = "cancelled"


class SubscriptionStatus(str, enum.Enum):
    active = "active"
    canceled = "canceled"
    past_due = "past_due"
    trialing = "trialing"


class PaymentIntent(Base):
    __tablename__ = "payment_intents"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(String(64), ForeignKey("student_profiles.id", ondelete="SET NULL"), nullable=True)
    amount = Column(Integer, nullable=False)  # cents
    currency = Column(String(3), nullable=False, default="BRL")
    method = Column(Enum(PaymentMethod, name="payment_method"), nullable=False, default=PaymentMethod.credit_card)
    fee_percent = Column(Float, nullable=False, default=0)
    status = Column(Enum(PaymentStatus, name="payment_status"), nullable=False, default=PaymentStatus.pending)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    plan = Column(Enum(TrainerPlan, name="trainer_plan"), nullable=False)
    billing_cycle = Column(String(10), nullable=False, default="monthly")
    status = Column(Enum(SubscriptionStatus, name="subscription_status"), nullable=False, default=SubscriptionStatus.active)
    current_period_start = Column(DateTime, nullable=False, default=utcnow)
    current_period_end = Column(DateTime, nullable=False)
    cancel_at_period_end = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class AICreditLedger(Base):
    __tablename__ = "ai_credit_ledger"

    id = Column(String(64), primary_key=True, default=generate_id)
    trainer_id = Column(String(64), ForeignKey("trainer_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)  # negative for usage
    type = Column(String(30), nullable=False)
    used_at = Column(DateTime, default=utcnow)
