"""
Dashboard endpoints.
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.core.dependencies import require_staff, require_student
from exam_portal.db.base import get_db
from exam_portal.models.user import User
from exam_portal.schemas.dashboard import AdminDashboard, StudentDashboard
from exam_portal.services import reporting

router = APIRouter()


@router.get("/student", response_model=StudentDashboard)
def student_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    return reporting.student_dashboard(db, current_user.id)


@router.get("/admin", response_model=AdminDashboard)
def admin_dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    return reporting.admin_dashboard(db)
