"""
Result endpoints scoped to the signed-in student.
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.core.dependencies import require_student
from exam_portal.db.base import get_db
from exam_portal.models.user import User
from exam_portal.schemas.result import AttemptHistory, ExamResultDetail, ExamReview, History
from exam_portal.services import reporting

router = APIRouter()


@router.get("/history", response_model=History)
def exam_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    return {"history": reporting.history(db, current_user.id)}


@router.get("/result/{exam_id}", response_model=ExamResultDetail)
def exam_result(
    exam_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    return reporting.result_detail(db, exam_id, current_user.id)


@router.get("/result/{exam_id}/attempts", response_model=AttemptHistory)
def exam_attempts(
    exam_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """Every recorded attempt on the exam, oldest first; the last one is current."""
    return {"exam_id": exam_id, "attempts": reporting.attempt_history(db, exam_id, current_user.id)}


@router.get("/review/{exam_id}", response_model=ExamReview)
def exam_review(
    exam_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """
    Per-question review rebuilt from the stored answers and the exam's
    current questions.
    """
    return reporting.review(db, exam_id, current_user.id)
