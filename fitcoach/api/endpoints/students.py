from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from fitcoach.api.deps import get_db, get_service, require_trainer
from fitcoach.models.user import User
from fitcoach.schemas.profile import StudentProfileResponse
from fitcoach.schemas.student import StudentCreate, StudentListItem, StudentStats, StudentStatusUpdate
from fitcoach.services.student import StudentService

router = APIRouter()


@router.get("/", response_model=List[StudentListItem])
async def list_students(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    students: StudentService = Depends(get_service("StudentService")),
):
    """List the trainer's students, newest first."""
    return students.list_students(db=db, trainer_id=current_user.id)


@router.post("/", response_model=StudentListItem, status_code=status.HTTP_201_CREATED)
async def add_student(
    student_data: StudentCreate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    students: StudentService = Depends(get_service("StudentService")),
):
    """Add a student account; the plan's student limit applies."""
    return students.add_student(db=db, trainer_id=current_user.id, student_data=student_data)


@router.get("/stats", response_model=StudentStats)
async def get_student_stats(
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    students: StudentService = Depends(get_service("StudentService")),
):
    return students.get_student_stats(db=db, trainer_id=current_user.id)


@router.patch("/{student_id}/status", response_model=StudentProfileResponse)
async def update_student_status(
    student_id: str,
    status_data: StudentStatusUpdate,
    current_user: User = Depends(require_trainer),
    db: Session = Depends(get_db),
    students: StudentService = Depends(get_service("StudentService")),
):
    """Activate, pause or cancel a student."""
    return students.update_status(
        db=db, trainer_id=current_user.id, student_id=student_id, new_status=status_data.status
    )
