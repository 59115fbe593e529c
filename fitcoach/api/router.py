"""API router configuration.

This module configures the main API router and includes all endpoint routers
for different features of the application.
"""

from fastapi import APIRouter

from fitcoach.api.endpoints import (
    admin,
    auth,
    dashboard,
    diet_plans,
    health,
    local_data,
    notifications,
    payments,
    profile,
    sessions,
    students,
    workouts,
)

api_router = APIRouter()

# Include all API routers
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(students.router, prefix="/students", tags=["students"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["sessions"])
api_router.include_router(diet_plans.router, prefix="/diet-plans", tags=["diet-plans"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(payments.router, prefix="/payments", tags=["payments"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(local_data.router, prefix="/local", tags=["local-data"])
