"""Payment API endpoints.

Payment intents, subscriptions, plan changes and AI credits for the signed-in
trainer, plus the plan catalog. Amounts are in cents.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_current_active_user, get_db, get_service, require_trainer
from fitcoach.models.user import User
from fitcoach.schemas.payment import (
    AICreditsPurchase,
    AIUsage,
    PaymentIntentCreate,
    PaymentResponse,
    PaymentStatusUpdate,
    PlanCatalog,
    PlanLimitsStatus,
    PlanUpdate,
    SubscriptionCreate,
    SubscriptionResponse,
)
from fitcoach.schemas.profile import TrainerProfileResponse
from fitcoach.services.payment import PaymentService

router = APIRouter()


@router.get("/", response_model=List[PaymentResponse])
async def list_payments(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    return payments.list_payments(db=db, trainer_id=current_user.id)


@router.post("/intents", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
async def create_payment_intent(
    payment_data: PaymentIntentCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    """Create a pending payment with the plan's platform fee."""
    return payments.create_payment_intent(db=db, trainer_id=current_user.id, payment_data=payment_data)


@router.patch("/intents/{payment_id}/status", response_model=PaymentResponse)
async def update_payment_status(
    payment_id: str,
    status_data: PaymentStatusUpdate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    return payments.update_payment_status(
        db=db, trainer_id=current_user.id, payment_id=payment_id, new_status=status_data.status
    )


@router.get("/subscription", response_model=Optional[SubscriptionResponse])
async def get_subscription(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    """The active subscription, or null."""
    return payments.get_subscription(db=db, trainer_id=current_user.id)


@router.post("/subscription", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    subscription_data: SubscriptionCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    return payments.create_subscription(db=db, trainer_id=current_user.id, subscription_data=subscription_data)


@router.delete("/subscription", response_model=SubscriptionResponse)
async def cancel_subscription(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    return payments.cancel_subscription(db=db, trainer_id=current_user.id)


@router.get("/plans", response_model=PlanCatalog)
async def get_plan_catalog(
    current_user: User = Depends(get_current_active_user),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    """Plans with formatted prices, yearly savings and the feature comparison."""
    return payments.get_plan_catalog()


@router.put("/plan", response_model=TrainerProfileResponse)
async def update_plan(
    plan_data: PlanUpdate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    """Switch plan; limits and credits follow the new plan."""
    return payments.update_trainer_plan(db=db, trainer_id=current_user.id, plan=plan_data.plan)


@router.get("/plan/limits", response_model=PlanLimitsStatus)
async def check_plan_limits(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    return payments.check_plan_limits(db=db, trainer_id=current_user.id)


@router.get("/ai-credits", response_model=AIUsage)
async def get_ai_usage(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    return payments.get_ai_usage(db=db, trainer_id=current_user.id)


@router.post("/ai-credits", response_model=TrainerProfileResponse)
async def add_ai_credits(
    purchase: AICreditsPurchase,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    payments: PaymentService = Depends(get_service("PaymentService")),
):
    return payments.add_ai_credits(db=db, trainer_id=current_user.id, amount=purchase.amount)
