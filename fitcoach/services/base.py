"""
Shared service utilities.

Transaction handling and common lookups used by every service that talks to
the relational database.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterable, Optional, Type, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fitcoach.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session, action: str = "saving changes"):
    """
    Commit on success, roll back on database errors.

    Args:
        db: Database session
        action: Human readable description used in the error detail

    Usage:
        with transaction(db, "creating session"):
            db.add(obj)
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back while {action}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database error while {action}",
        )


def get_or_404(db: Session, model: Type[ModelType], id: Any, detail: Optional[str] = None) -> ModelType:
    """Get a record by primary key or raise 404."""
    obj = db.query(model).filter(model.id == id).first()
    if not obj:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{model.__name__} not found",
        )
    return obj


def full_name(profile, default: str = "") -> str:
    if profile is None:
        return default
    name = f"{profile.first_name or ''} {profile.last_name or ''}".strip()
    return name or default


def names_by_id(db: Session, ids: Iterable[str], default: str = "") -> dict:
    """Map profile ids to full names with a single query."""
    from fitcoach.models.profile import Profile

    ids = {i for i in ids if i}
    if not ids:
        return {}
    profiles = db.query(Profile).filter(Profile.id.in_(ids)).all()
    return {p.id: full_name(p, default) for p in profiles}
