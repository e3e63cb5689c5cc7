"""
Assignment endpoints.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from exam_portal.core.dependencies import get_current_user, require_staff
from exam_portal.core.permissions import resolve_student_scope
from exam_portal.db.base import get_db
from exam_portal.models.user import User
from exam_portal.schemas.exam import AssignmentCreate, AssignmentFanOut, AssignmentList
from exam_portal.services import assignments as assignment_service

router = APIRouter()


@router.post("", response_model=AssignmentFanOut, status_code=status.HTTP_201_CREATED)
def assign_exam(
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    """Assign an exam to every student; existing assignments are left as they are."""
    assigned, skipped = assignment_service.assign_to_all_students(db, payload.exam_id)
    return {
        "message": f"Exam assigned to {assigned + skipped} students",
        "assigned_count": assigned,
        "skipped_count": skipped,
    }


@router.get("", response_model=AssignmentList)
def list_assignments(
    student_id: Optional[int] = Query(None, alias="studentId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Assignments of the caller, or of another student when a teacher asks.
    """
    target = resolve_student_scope(current_user, student_id)
    rows = assignment_service.list_for_student(db, target)
    return {
        "assignments": [
            {
                "id": a.id,
                "exam": {
                    "id": a.exam.id,
                    "title": a.exam.title,
                    "category": a.exam.category,
                    "duration": a.exam.duration,
                    "pass_percentage": a.exam.pass_percentage,
                    "question_count": len(a.exam.exam_questions),
                },
                "status": a.status,
                "assigned_at": a.assigned_at,
                "started_at": a.started_at,
                "completed_at": a.completed_at,
                "score": a.score,
                "percentage": a.percentage,
                "passed": a.passed,
            }
            for a in rows
        ]
    }
