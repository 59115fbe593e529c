from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from fitcoach.models.payment import PaymentMethod, PaymentStatus, SubscriptionStatus
from fitcoach.models.profile import TrainerPlan
from fitcoach.schemas.base import BaseSchema


class PaymentIntentCreate(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in cents")
    method: PaymentMethod = PaymentMethod.credit_card
    student_id: Optional[str] = None
    description: Optional[str] = None


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus


class PaymentResponse(BaseSchema):
    id: str
    trainer_id: str
    student_id: Optional[str] = None
    amount: int
    currency: str
    method: PaymentMethod
    fee_percent: float
    net_amount: int
    status: PaymentStatus
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    student_name: Optional[str] = None


class SubscriptionCreate(BaseModel):
    plan: TrainerPlan
    billing_cycle: Literal["monthly", "yearly"] = "monthly"


class SubscriptionResponse(BaseSchema):
    id: str
    trainer_id: str
    plan: TrainerPlan
    billing_cycle: str
    status: SubscriptionStatus
    current_period_start: datetime
    current_period_end: datetime
    cancel_at_period_end: bool


class PlanUpdate(BaseModel):
    plan: TrainerPlan


class PlanLimitsStatus(BaseModel):
    plan: TrainerPlan
    max_students: int
    current_students: int
    can_add_students: bool
    ai_credits: int
    can_use_ai: bool
    fee_percentage: float
    recommended_plan: TrainerPlan
    upgrade_recommended: bool
    downgrade_possible: bool
    active_until: Optional[datetime] = None
    days_remaining: Optional[int] = None


class PlanCatalogItem(BaseModel):
    plan: TrainerPlan
    name: str
    monthly_price: int
    yearly_price: int
    monthly_price_text: str
    yearly_price_text: str
    yearly_savings: int
    yearly_savings_text: str
    max_students: int = Field(..., description="0 means unlimited")
    ai_credits: int
    fee_percentage: float
    features: List[str]


class PlanCatalog(BaseModel):
    plans: List[PlanCatalogItem]
    comparison: Dict[str, Dict[str, Union[bool, str]]]


class AIUsage(BaseModel):
    credits_remaining: int
    credits_used: int
    credits_purchased: int


class AICreditsPurchase(BaseModel):
    amount: int = Field(..., gt=0, le=1000)
