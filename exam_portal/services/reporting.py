"""
Read-only projections over stored exam results.

Reviews are rebuilt from the stored answer records joined with the exam's
current question text, so later edits to a question show up in old reviews.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from exam_portal.core.errors import NotFoundError
from exam_portal.models.assignment import AssignmentStatus, ExamAssignment
from exam_portal.models.exam import Exam
from exam_portal.models.exam_result import ExamResult, ExamResultAttempt
from exam_portal.models.user import User, UserRole

logger = logging.getLogger(__name__)


def exam_header(exam: Exam) -> Dict[str, Any]:
    return {
        "id": exam.id,
        "title": exam.title,
        "category": exam.category,
        "duration": exam.duration,
        "pass_percentage": exam.pass_percentage,
    }


def result_summary(result) -> Dict[str, Any]:
    """Works for both the latest result and archived attempts."""
    return {
        "score": result.score,
        "total_questions": result.total_questions,
        "percentage": result.percentage,
        "result": result.result,
        "correct_answers": result.correct_answers,
        "wrong_answers": result.wrong_answers,
        "started_at": result.started_at,
        "completed_at": result.completed_at or getattr(result, "created_at", None),
        "time_taken_seconds": result.time_taken_seconds,
    }


def _get_result(db: Session, exam_id: int, student_id: int) -> ExamResult:
    result = (
        db.query(ExamResult)
        .filter(ExamResult.exam_id == exam_id, ExamResult.student_id == student_id)
        .first()
    )
    if not result:
        raise NotFoundError("Result not found")
    return result


def history(db: Session, student_id: int) -> List[Dict[str, Any]]:
    rows = (
        db.query(ExamResult, Exam)
        .join(Exam, Exam.id == ExamResult.exam_id)
        .filter(ExamResult.student_id == student_id)
        .order_by(ExamResult.completed_at.desc(), ExamResult.created_at.desc())
        .all()
    )
    entries = []
    for result, exam in rows:
        header = exam_header(exam)
        header["exam_id"] = header.pop("id")
        entries.append({**header, **result_summary(result)})
    return entries


def result_detail(db: Session, exam_id: int, student_id: int) -> Dict[str, Any]:
    result = _get_result(db, exam_id, student_id)
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    header = exam_header(exam)
    header["exam_id"] = header.pop("id")
    return {**header, **result_summary(result)}


def attempt_history(db: Session, exam_id: int, student_id: int) -> List[Dict[str, Any]]:
    """Archived attempts oldest first, followed by the latest result."""
    latest = _get_result(db, exam_id, student_id)
    archived = (
        db.query(ExamResultAttempt)
        .filter(ExamResultAttempt.exam_id == exam_id, ExamResultAttempt.student_id == student_id)
        .order_by(ExamResultAttempt.attempt_number.asc())
        .all()
    )

    attempts = [
        {**result_summary(a), "attempt_number": a.attempt_number, "latest": False}
        for a in archived
    ]
    attempts.append({**result_summary(latest), "attempt_number": len(archived) + 1, "latest": True})
    return attempts


def review(db: Session, exam_id: int, student_id: int) -> Dict[str, Any]:
    result = _get_result(db, exam_id, student_id)
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    records = {rec["questionId"]: rec for rec in (result.answers or [])}

    items = []
    for question in exam.questions:
        rec = records.get(question.id) or {}
        correct_from_question = question.correct_option.id if question.correct_option else None
        items.append({
            "question_id": question.id,
            "question": question.text,
            "options": [{"id": o.id, "text": o.text} for o in question.options],
            "selected_option_id": rec.get("selectedOptionId"),
            "correct_option_id": rec.get("correctOptionId") or correct_from_question,
            "is_correct": bool(rec.get("isCorrect")),
        })

    return {"exam": exam_header(exam), "summary": result_summary(result), "review": items}


def exam_report(db: Session, exam_id: int) -> Dict[str, Any]:
    """Every student's latest result on an exam, best score first."""
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    rows = (
        db.query(ExamResult, User)
        .outerjoin(User, User.id == ExamResult.student_id)
        .filter(ExamResult.exam_id == exam_id)
        .order_by(ExamResult.score.desc(), ExamResult.id.asc())
        .all()
    )
    results = [
        {
            "student_id": result.student_id,
            "student_name": student.name if student else "Unknown",
            "email": student.email if student else "",
            "marks_obtained": result.score,
            "total_marks": result.total_questions,
            "percentage": result.percentage,
            "status": "Pass" if result.result == "pass" else "Fail",
            "completed_at": result.completed_at,
        }
        for result, student in rows
    ]
    return {"exam": exam_header(exam), "results": results}


def student_dashboard(db: Session, student_id: int) -> Dict[str, Any]:
    assignments = (
        db.query(ExamAssignment, Exam)
        .join(Exam, Exam.id == ExamAssignment.exam_id)
        .filter(ExamAssignment.student_id == student_id)
        .order_by(ExamAssignment.assigned_at.desc(), ExamAssignment.id.desc())
        .all()
    )

    upcoming, completed = [], []
    for assignment, exam in assignments:
        entry = {
            **exam_header(exam),
            "question_count": len(exam.exam_questions),
            "status": assignment.status,
            "assigned_at": assignment.assigned_at,
            "completed_at": assignment.completed_at,
            "score": assignment.score,
            "percentage": assignment.percentage,
            "passed": assignment.passed,
        }
        if assignment.status == AssignmentStatus.COMPLETED:
            completed.append(entry)
        elif exam.is_active:
            upcoming.append(entry)

    average = (
        round(sum(e["percentage"] or 0 for e in completed) / len(completed)) if completed else 0
    )
    return {
        "upcoming_exams": upcoming,
        "completed_exams": completed,
        "stats": {
            "total_upcoming": len(upcoming),
            "total_completed": len(completed),
            "average_score": average,
        },
    }


def admin_dashboard(db: Session, recent_limit: int = 6) -> Dict[str, Any]:
    total_students = db.query(func.count(User.id)).filter(User.role == UserRole.STUDENT).scalar() or 0
    active_exams = db.query(func.count(Exam.id)).filter(Exam.is_active.is_(True)).scalar() or 0
    categories = db.query(func.count(func.distinct(Exam.category))).scalar() or 0

    total_assignments = db.query(func.count(ExamAssignment.id)).scalar() or 0
    completed_assignments = (
        db.query(func.count(ExamAssignment.id))
        .filter(ExamAssignment.status == AssignmentStatus.COMPLETED)
        .scalar()
        or 0
    )
    completion_rate = (
        round(completed_assignments / total_assignments * 100) if total_assignments else 0
    )

    avg_percentage: Optional[float] = db.query(func.avg(ExamResult.percentage)).scalar()
    avg_score = round(avg_percentage) if avg_percentage else 0

    recent = (
        db.query(ExamResult, Exam)
        .join(Exam, Exam.id == ExamResult.exam_id)
        .order_by(ExamResult.completed_at.desc(), ExamResult.id.desc())
        .limit(recent_limit)
        .all()
    )
    recent_activity = [
        {
            "exam_id": exam.id,
            "student_id": result.student_id,
            "title": f"Result: {exam.title} - {result.percentage:.0f}%",
            "completed_at": result.completed_at,
        }
        for result, exam in recent
    ]

    return {
        "stats": {
            "total_students": total_students,
            "active_exams": active_exams,
            "categories": categories,
            "completion_rate": completion_rate,
            "avg_score": avg_score,
        },
        "recent_activity": recent_activity,
    }


QUESTIONS_PER_SHEET = 5
SHEETS_PER_TREE = 8000


def impact_statistics(db: Session) -> Dict[str, Any]:
    """Paper saved by answering online: answers -> sheets -> trees."""
    total_answers = sum(len(answers or []) for (answers,) in db.query(ExamResult.answers).all())
    sheets_saved = total_answers / QUESTIONS_PER_SHEET
    return {
        "total_answers": total_answers,
        "questions_per_sheet": QUESTIONS_PER_SHEET,
        "sheets_per_tree": SHEETS_PER_TREE,
        "trees_saved": sheets_saved / SHEETS_PER_TREE,
    }
