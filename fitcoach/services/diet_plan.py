"""Diet plan service.

Diet plans are generated from a calorie target and split into four meals.
How a plan is paid for depends on the trainer's plan: free trainers pay per
diet, pro trainers spend an AI credit and elite trainers generate freely.
"""

from typing import Any, Dict, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from fitcoach.core.config import settings
from fitcoach.models.diet_plan import DietPlan
from fitcoach.models.payment import AICreditLedger, PaymentIntent, PaymentMethod, PaymentStatus
from fitcoach.models.profile import StudentProfile, TrainerPlan, TrainerProfile
from fitcoach.schemas.diet_plan import DietPlanCreate
from fitcoach.services.base import get_or_404, names_by_id, transaction
from fitcoach.services.plan_limits import PlanLimitsService
from fitcoach.utils.logger import diet_logger

# (meal name, share of the daily target, foods)
MEAL_TEMPLATE = [
    ("Breakfast", 0.25, [
        {"name": "Oatmeal with fruit", "calories": 200, "portion": "1 cup"},
        {"name": "Greek yogurt", "calories": 100, "portion": "1 pot"},
    ]),
    ("Lunch", 0.35, [
        {"name": "Grilled chicken breast", "calories": 250, "portion": "150g"},
        {"name": "Brown rice", "calories": 150, "portion": "1 cup"},
        {"name": "Steamed broccoli", "calories": 50, "portion": "1 cup"},
    ]),
    ("Afternoon snack", 0.15, [
        {"name": "Mixed nuts", "calories": 120, "portion": "30g"},
        {"name": "Apple", "calories": 80, "portion": "1 unit"},
    ]),
    ("Dinner", 0.25, [
        {"name": "Grilled salmon", "calories": 200, "portion": "120g"},
        {"name": "Sweet potato", "calories": 150, "portion": "1 medium"},
        {"name": "Green salad", "calories": 30, "portion": "1 plate"},
    ]),
]

AI_CREDIT_TYPE_DIET = "genDiet"


def build_diet_content(diet_data: DietPlanCreate) -> Dict[str, Any]:
    """Meal plan content for a calorie target."""
    target = diet_data.target_calories
    return {
        "goal": diet_data.goal,
        "target_calories": target,
        "restrictions": list(diet_data.restrictions),
        "preferences": list(diet_data.preferences),
        "meals": [
            {
                "name": name,
                "calories": int(round(target * share)),
                "foods": [dict(food) for food in foods],
            }
            for name, share, foods in MEAL_TEMPLATE
        ],
    }


def diet_plan_to_dict(plan: DietPlan, student_name: str = "") -> Dict[str, Any]:
    return {
        "id": plan.id,
        "trainer_id": plan.trainer_id,
        "student_id": plan.student_id,
        "name": plan.name,
        "total_calories": plan.total_calories,
        "is_paid": plan.is_paid,
        "content": plan.content,
        "student_name": student_name,
        "created_at": plan.created_at,
    }


class DietPlanService:
    @staticmethod
    def list_diet_plans(db: Session, trainer_id: str) -> List[Dict[str, Any]]:
        plans = (
            db.query(DietPlan)
            .filter(DietPlan.trainer_id == trainer_id)
            .order_by(DietPlan.created_at.desc())
            .all()
        )
        names = names_by_id(db, (p.student_id for p in plans))
        return [diet_plan_to_dict(p, names.get(p.student_id, "")) for p in plans]

    @staticmethod
    def list_student_diet_plans(db: Session, student_id: str) -> List[Dict[str, Any]]:
        plans = (
            db.query(DietPlan)
            .filter(DietPlan.student_id == student_id)
            .order_by(DietPlan.created_at.desc())
            .all()
        )
        names = names_by_id(db, [student_id])
        return [diet_plan_to_dict(p, names.get(student_id, "")) for p in plans]

    @staticmethod
    def create_diet_plan(db: Session, trainer_id: str, diet_data: DietPlanCreate) -> Dict[str, Any]:
        """
        Generate a diet plan for one of the trainer's students.

        Raises:
            HTTPException: 404 for unknown trainer or student, 402 when a pro
                trainer has no AI credits left
        """
        trainer_profile = get_or_404(db, TrainerProfile, trainer_id, "Trainer profile not found")

        student = (
            db.query(StudentProfile)
            .filter(StudentProfile.id == diet_data.student_id, StudentProfile.trainer_id == trainer_id)
            .first()
        )
        if not student:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Student not found",
            )

        plan = TrainerPlan(trainer_profile.plan)
        if plan == TrainerPlan.pro and not PlanLimitsService.can_use_ai(trainer_profile):
            diet_logger.warning("No AI credits left", "CREATE", trainer_id=trainer_id)
            raise HTTPException(
                status_code=status.HTTP_402_PAYMENT_REQUIRED,
                detail="Not enough AI credits. Upgrade your plan to generate more diet plans.",
            )

        diet_logger.info(f"Creating diet plan '{diet_data.name}'", "CREATE", trainer_id=trainer_id, plan=plan.value)

        with transaction(db, "creating diet plan"):
            is_paid = False
            if plan == TrainerPlan.free:
                payment = PaymentIntent(
                    trainer_id=trainer_id,
                    student_id=diet_data.student_id,
                    amount=settings.DIET_PLAN_PRICE_CENTS,
                    currency=settings.CURRENCY,
                    method=PaymentMethod.pix,
                    fee_percent=0,
                    status=PaymentStatus.pending,
                    description=f"Diet plan: {diet_data.name}",
                )
                db.add(payment)
                db.flush()
                # Payment approval is simulated
                payment.status = PaymentStatus.succeeded
                is_paid = True
            elif plan == TrainerPlan.pro:
                trainer_profile.ai_credits = max(0, (trainer_profile.ai_credits or 0) - 1)
                db.add(AICreditLedger(trainer_id=trainer_id, amount=-1, type=AI_CREDIT_TYPE_DIET))

            diet_plan = DietPlan(
                trainer_id=trainer_id,
                student_id=diet_data.student_id,
                name=diet_data.name,
                total_calories=diet_data.target_calories,
                is_paid=is_paid,
                content=build_diet_content(diet_data),
            )
            db.add(diet_plan)

        db.refresh(diet_plan)
        diet_logger.success("Diet plan created", "CREATE", diet_plan_id=diet_plan.id, is_paid=is_paid)
        names = names_by_id(db, [diet_plan.student_id])
        return diet_plan_to_dict(diet_plan, names.get(diet_plan.student_id, ""))

    @staticmethod
    def get_diet_stats(db: Session, trainer_id: str) -> Dict[str, int]:
        plans = db.query(DietPlan).filter(DietPlan.trainer_id == trainer_id).all()
        calories = [p.total_calories for p in plans if p.total_calories]
        return {
            "total": len(plans),
            "paid": sum(1 for p in plans if p.is_paid),
            "average_calories": int(round(sum(calories) / len(calories))) if calories else 0,
        }
