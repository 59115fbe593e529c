"""
API dependency injection module.

This module provides dependency injection functions for API endpoints,
including database sessions, authentication and container-resolved services.
"""

import logging
from typing import Any, Callable

from fastapi import HTTPException, status

from fitcoach.core.container import ServiceNotBoundError, container
from fitcoach.db.session import get_db
from fitcoach.models.profile import UserRole
from fitcoach.services.auth import get_current_active_user, get_current_user, require_roles

logger = logging.getLogger(__name__)

__all__ = [
    "get_db",
    "get_service",
    "get_current_user",
    "get_current_active_user",
    "require_roles",
    "require_admin",
    "require_trainer",
    "require_student",
]


def get_service(token: str) -> Callable[[], Any]:
    """
    Build a dependency that resolves ``token`` from the container.

    Args:
        token: Service token, e.g. ``"StudentService"``

    Returns:
        A FastAPI dependency returning the bound service
    """

    def dependency() -> Any:
        try:
            return container.resolve(token)
        except ServiceNotBoundError as e:
            logger.error(f"Service resolution failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Service unavailable: {token}",
            )

    return dependency


require_admin = require_roles(UserRole.admin)
require_trainer = require_roles(UserRole.trainer)
require_student = require_roles(UserRole.student)

