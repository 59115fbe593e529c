"""Admin API endpoints.

Platform statistics, payments overview, activity feed, trainer management,
system settings and notifications. Every route requires the admin role.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db, get_service, require_admin
from fitcoach.schemas.admin import (
    AdminActivity,
    AdminPayment,
    AdminStats,
    SystemSettingResponse,
    SystemSettingUpdate,
    TrainerList,
    TrainerPlanUpdate,
)
from fitcoach.schemas.base import MessageResponse
from fitcoach.schemas.notification import NotificationCreate, NotificationResponse
from fitcoach.schemas.profile import TrainerProfileResponse
from fitcoach.services.admin import AdminService
from fitcoach.services.notification import NotificationService
from fitcoach.services.trainer_management import TrainerManagementService

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=AdminStats)
async def get_admin_stats(
    db: Session = Depends(get_db),
    admin: AdminService = Depends(get_service("AdminService")),
):
    """Platform-wide counts, revenue (cents) and system health."""
    return admin.get_admin_stats(db=db)


@router.get("/payments", response_model=List[AdminPayment])
async def get_recent_payments(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: AdminService = Depends(get_service("AdminService")),
):
    return admin.get_recent_payments(db=db, limit=limit)


@router.get("/activity", response_model=List[AdminActivity])
async def get_admin_activity(
    db: Session = Depends(get_db),
    admin: AdminService = Depends(get_service("AdminService")),
):
    return admin.get_admin_activity(db=db)


@router.get("/trainers", response_model=TrainerList)
async def list_trainers(
    search: Optional[str] = Query(None, description="Case-insensitive name search"),
    plan: Literal["all", "free", "pro", "elite"] = Query("all", description="Plan filter"),
    db: Session = Depends(get_db),
    trainers: TrainerManagementService = Depends(get_service("TrainerManagementService")),
):
    """Active trainers with their plan and number of active students."""
    result = trainers.filter_trainers(db=db, search=search, plan=plan)
    return TrainerList(trainers=result, total=len(result))


@router.put("/trainers/{trainer_id}/plan", response_model=TrainerProfileResponse)
async def update_trainer_plan(
    trainer_id: str,
    plan_data: TrainerPlanUpdate,
    db: Session = Depends(get_db),
    trainers: TrainerManagementService = Depends(get_service("TrainerManagementService")),
):
    return trainers.update_trainer_plan(db=db, trainer_id=trainer_id, plan=plan_data.plan)


@router.delete("/trainers/{trainer_id}", response_model=MessageResponse)
async def remove_trainer(
    trainer_id: str,
    db: Session = Depends(get_db),
    trainers: TrainerManagementService = Depends(get_service("TrainerManagementService")),
):
    """Deactivate a trainer account."""
    trainers.remove_trainer(db=db, trainer_id=trainer_id)
    return MessageResponse(message="Trainer removed")


@router.get("/settings", response_model=List[SystemSettingResponse])
async def list_system_settings(
    db: Session = Depends(get_db),
    admin: AdminService = Depends(get_service("AdminService")),
):
    return admin.list_system_settings(db=db)


@router.put("/settings/{key}", response_model=SystemSettingResponse)
async def update_system_setting(
    key: str,
    setting_data: SystemSettingUpdate,
    db: Session = Depends(get_db),
    admin: AdminService = Depends(get_service("AdminService")),
):
    return admin.update_system_setting(db=db, key=key, value=setting_data.value)


@router.post("/notifications", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
async def send_notification(
    notification_data: NotificationCreate,
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_service("NotificationService")),
):
    """Send a notification to any user."""
    return notifications.create_notification(
        db=db,
        user_id=notification_data.user_id,
        title=notification_data.title,
        message=notification_data.message,
        type=notification_data.type,
    )
