"""
Exam definition endpoints (teachers and admins only).
"""
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from exam_portal.core.dependencies import require_staff
from exam_portal.db.base import get_db
from exam_portal.models.exam import Exam, ExamQuestion
from exam_portal.models.question import Question
from exam_portal.models.user import User
from exam_portal.schemas.exam import ExamActiveUpdate, ExamCreate, ExamDetail, ExamStats, ExamSummary
from exam_portal.services.question_bank import count_questions

router = APIRouter()


def _summary(exam: Exam) -> dict:
    return {
        "id": exam.id,
        "title": exam.title,
        "category": exam.category,
        "duration": exam.duration,
        "pass_percentage": exam.pass_percentage,
        "is_active": exam.is_active,
        "created_by": exam.created_by,
        "created_at": exam.created_at,
        "question_count": len(exam.exam_questions),
    }


def _get_exam(db: Session, exam_id: int) -> Exam:
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exam not found")
    return exam


@router.get("", response_model=List[ExamSummary])
def list_exams(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    exams = db.query(Exam).order_by(Exam.created_at.desc(), Exam.id.desc()).all()
    return [_summary(exam) for exam in exams]


@router.post("", response_model=ExamDetail, status_code=status.HTTP_201_CREATED)
def create_exam(
    exam_in: ExamCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    """
    Create an exam from an ordered list of existing question ids.

    Repeated ids are kept as given.

    Raises:
        HTTPException: If any referenced question does not exist
    """
    wanted = set(exam_in.questions)
    found = {qid for (qid,) in db.query(Question.id).filter(Question.id.in_(wanted)).all()}
    missing = sorted(wanted - found)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Questions not found: {', '.join(str(m) for m in missing)}",
        )

    exam = Exam(
        title=exam_in.title.strip(),
        category=exam_in.category.strip(),
        duration=exam_in.duration,
        pass_percentage=exam_in.pass_percentage,
        is_active=exam_in.is_active,
        created_by=current_user.id,
        exam_questions=[
            ExamQuestion(question_id=qid, position=position)
            for position, qid in enumerate(exam_in.questions)
        ],
    )
    db.add(exam)
    db.commit()
    db.refresh(exam)
    return {**_summary(exam), "questions": exam.questions}


@router.get("/stats", response_model=ExamStats)
def exam_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    total_exams = db.query(func.count(Exam.id)).scalar() or 0
    active_exams = db.query(func.count(Exam.id)).filter(Exam.is_active.is_(True)).scalar() or 0
    avg_pass = db.query(func.avg(Exam.pass_percentage)).scalar()
    return {
        "total_exams": total_exams,
        "active_exams": active_exams,
        "total_questions": count_questions(db),
        "avg_pass_rate": round(avg_pass) if avg_pass else 0,
    }


@router.get("/{exam_id}", response_model=ExamDetail)
def get_exam(
    exam_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    exam = _get_exam(db, exam_id)
    return {**_summary(exam), "questions": exam.questions}


@router.patch("/{exam_id}/active", response_model=ExamSummary)
def set_exam_active(
    exam_id: int,
    payload: ExamActiveUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    exam = _get_exam(db, exam_id)
    exam.is_active = payload.is_active
    db.commit()
    db.refresh(exam)
    return _summary(exam)
