"""
Exam taking endpoints: start, submit and retry (students only).
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.core.dependencies import require_student
from exam_portal.db.base import get_db
from exam_portal.models.user import User
from exam_portal.schemas.common import Message
from exam_portal.schemas.exam import ExamStart
from exam_portal.schemas.question import QuestionTakerView
from exam_portal.schemas.result import ExamSubmit, SubmissionResult
from exam_portal.services import scoring

router = APIRouter()


@router.get("/start/{exam_id}", response_model=ExamStart)
def start_exam(
    exam_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """
    Fetch exam content for taking. The first call starts the clock.

    Options are sent without their correctness flags.
    """
    exam, assignment, remaining = scoring.start_exam(db, exam_id, current_user)
    return {
        "exam": {
            "id": exam.id,
            "title": exam.title,
            "category": exam.category,
            "duration": exam.duration,
            "pass_percentage": exam.pass_percentage,
            "questions": [QuestionTakerView.model_validate(q) for q in exam.questions],
        },
        "started_at": assignment.started_at,
        "time_remaining_seconds": remaining,
    }


@router.post("/submit/{exam_id}", response_model=SubmissionResult)
def submit_exam(
    exam_id: int,
    payload: ExamSubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """
    Submit answers and get the score back.

    ## Request Body
    ```json
    {"answers": {"12": 40, "13": 47}, "timeTaken": 312}
    ```

    ## Errors
    - 403 when the exam is not assigned to the caller
    - 404 when the exam does not exist
    - 409 when the exam was already submitted
    """
    card, time_taken = scoring.submit_exam(
        db, exam_id, current_user, payload.answers, payload.time_taken
    )
    return {
        "message": "Exam submitted",
        "score": card.score,
        "total": card.total,
        "percentage": card.percentage,
        "passed": card.passed,
        "correct_answers": card.correct_answers,
        "wrong_answers": card.wrong_answers,
        "time_taken_seconds": time_taken,
        "review": card.review,
    }


@router.post("/retry/{exam_id}", response_model=Message)
def retry_exam(
    exam_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
) -> Any:
    """Reopen a completed exam. The previous result stays until the next submission."""
    scoring.retry_exam(db, exam_id, current_user)
    return {"message": "Exam reset for retry"}
