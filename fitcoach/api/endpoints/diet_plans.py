from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db, get_service, require_student, require_trainer
from fitcoach.models.user import User
from fitcoach.schemas.diet_plan import DietPlanCreate, DietPlanResponse, DietStats
from fitcoach.services.diet_plan import DietPlanService

router = APIRouter()


@router.get("/", response_model=List[DietPlanResponse])
async def list_diet_plans(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    diet_plans: DietPlanService = Depends(get_service("DietPlanService")),
):
    return diet_plans.list_diet_plans(db=db, trainer_id=current_user.id)


@router.post("/", response_model=DietPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_diet_plan(
    diet_data: DietPlanCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    diet_plans: DietPlanService = Depends(get_service("DietPlanService")),
):
    """
    Generate a diet plan for a student.

    Free plans pay per diet, pro plans spend an AI credit, elite is unlimited.
    """
    return diet_plans.create_diet_plan(db=db, trainer_id=current_user.id, diet_data=diet_data)


@router.get("/stats", response_model=DietStats)
async def get_diet_stats(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    diet_plans: DietPlanService = Depends(get_service("DietPlanService")),
):
    return diet_plans.get_diet_stats(db=db, trainer_id=current_user.id)


@router.get("/mine", response_model=List[DietPlanResponse])
async def list_my_diet_plans(
    current_user: User = Depends(require_student),
    db: Session = Depends(get_db),
    diet_plans: DietPlanService = Depends(get_service("DietPlanService")),
):
    return diet_plans.list_student_diet_plans(db=db, student_id=current_user.id)
