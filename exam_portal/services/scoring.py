"""
Exam taking and scoring.

Correctness is read straight off the options flagged `is_correct` on the
exam's questions at submission time; there is no separate answer key.
Unanswered questions count as neither correct nor wrong.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from exam_portal.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationFailedError
from exam_portal.models.assignment import AssignmentStatus, ExamAssignment
from exam_portal.models.exam import Exam
from exam_portal.models.exam_result import ExamResult, ExamResultAttempt
from exam_portal.models.question import Question
from exam_portal.models.user import User

logger = logging.getLogger(__name__)

NOT_ANSWERED = "Not answered"


@dataclass
class Scorecard:
    """Outcome of scoring one submission."""

    score: int = 0
    total: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0
    percentage: float = 0.0
    passed: bool = False
    answers: List[Dict[str, Any]] = field(default_factory=list)
    review: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def result(self) -> str:
        return "pass" if self.passed else "fail"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def score_exam(
    questions: Sequence[Question],
    answers: Mapping[int, Optional[int]],
    pass_percentage: float,
) -> Scorecard:
    """
    Score a submission against the exam's questions, in list order.

    Args:
        questions: Exam questions with their options loaded
        answers: Chosen option id per question id; missing means unanswered
        pass_percentage: Inclusive pass threshold

    Returns:
        Scorecard with per-question answer records and review items
    """
    card = Scorecard(total=len(questions))

    for question in questions:
        selected = answers.get(question.id)
        correct_option = question.correct_option
        correct_id = correct_option.id if correct_option is not None else None
        selected_option = next((o for o in question.options if o.id == selected), None)

        is_correct = selected is not None and correct_id is not None and selected == correct_id
        if is_correct:
            card.score += 1
            card.correct_answers += 1
        elif selected is not None:
            card.wrong_answers += 1

        card.answers.append({
            "questionId": question.id,
            "selectedOptionId": selected,
            "correctOptionId": correct_id,
            "isCorrect": is_correct,
        })
        card.review.append({
            "question_id": question.id,
            "question": question.text,
            "selected_text": selected_option.text if selected_option else NOT_ANSWERED,
            "correct_text": correct_option.text if correct_option else "",
            "correct": is_correct,
        })

    card.percentage = (card.score / card.total) * 100 if card.total > 0 else 0
    card.passed = card.percentage >= pass_percentage
    return card


def compute_time_taken(
    started_at: datetime,
    completed_at: datetime,
    client_value: Any = None,
) -> int:
    """Client-reported seconds when a number was sent, else the timestamp gap."""
    if isinstance(client_value, (int, float)) and not isinstance(client_value, bool):
        if math.isfinite(client_value):
            return max(0, int(round(client_value)))

    elapsed = (as_utc(completed_at) - as_utc(started_at)).total_seconds()
    return max(0, int(round(elapsed)))


def _get_assignment(db: Session, exam_id: int, student_id: int) -> Optional[ExamAssignment]:
    return (
        db.query(ExamAssignment)
        .filter(ExamAssignment.exam_id == exam_id, ExamAssignment.student_id == student_id)
        .first()
    )


def start_exam(db: Session, exam_id: int, student: User) -> Tuple[Exam, ExamAssignment, int]:
    """
    Open an assigned exam for taking.

    The first call stamps `started_at`; later calls leave it alone.

    Returns:
        (exam, assignment, seconds remaining)
    """
    assignment = _get_assignment(db, exam_id, student.id)
    if not assignment:
        raise ForbiddenError("Exam not assigned")

    if assignment.status == AssignmentStatus.COMPLETED:
        raise ValidationFailedError("Exam already completed")

    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    if not exam.is_active:
        raise ValidationFailedError("Exam is inactive")

    if assignment.started_at is None:
        assignment.started_at = utcnow()
        db.commit()
        db.refresh(assignment)

    elapsed = (utcnow() - as_utc(assignment.started_at)).total_seconds()
    remaining = max(0, int(exam.duration * 60 - elapsed))
    return exam, assignment, remaining


def _archive(db: Session, result: ExamResult) -> None:
    previous = (
        db.query(ExamResultAttempt)
        .filter(
            ExamResultAttempt.exam_id == result.exam_id,
            ExamResultAttempt.student_id == result.student_id,
        )
        .count()
    )
    db.add(ExamResultAttempt(
        exam_id=result.exam_id,
        student_id=result.student_id,
        attempt_number=previous + 1,
        score=result.score,
        total_questions=result.total_questions,
        percentage=result.percentage,
        result=result.result,
        correct_answers=result.correct_answers,
        wrong_answers=result.wrong_answers,
        started_at=result.started_at,
        completed_at=result.completed_at,
        time_taken_seconds=result.time_taken_seconds,
        answers=list(result.answers or []),
    ))


def _upsert_result(
    db: Session,
    exam_id: int,
    student_id: int,
    card: Scorecard,
    started_at: datetime,
    completed_at: datetime,
    time_taken: int,
) -> ExamResult:
    result = (
        db.query(ExamResult)
        .filter(ExamResult.exam_id == exam_id, ExamResult.student_id == student_id)
        .first()
    )
    if result is None:
        result = ExamResult(exam_id=exam_id, student_id=student_id)
        db.add(result)
    else:
        _archive(db, result)

    result.score = card.score
    result.total_questions = card.total
    result.percentage = card.percentage
    result.result = card.result
    result.correct_answers = card.correct_answers
    result.wrong_answers = card.wrong_answers
    result.started_at = started_at
    result.completed_at = completed_at
    result.time_taken_seconds = time_taken
    result.answers = card.answers
    return result


def submit_exam(
    db: Session,
    exam_id: int,
    student: User,
    answers: Mapping[int, Optional[int]],
    client_time_taken: Any = None,
) -> Tuple[Scorecard, int]:
    """
    Score a submission and record it.

    The pending -> completed transition is a conditional update, so of two
    concurrent submissions only one commits. The assignment update and the
    result upsert share one transaction.

    Returns:
        (scorecard, time taken in seconds)

    Raises:
        ForbiddenError: No assignment for this student and exam
        ConflictError: The exam was already submitted
        NotFoundError: The exam no longer exists
    """
    assignment = _get_assignment(db, exam_id, student.id)
    if not assignment:
        raise ForbiddenError("Exam not assigned")

    if assignment.status == AssignmentStatus.COMPLETED:
        raise ConflictError("Exam already submitted")

    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    card = score_exam(exam.questions, answers, exam.pass_percentage)

    completed_at = utcnow()
    started_at = as_utc(assignment.started_at) or completed_at
    time_taken = compute_time_taken(started_at, completed_at, client_time_taken)

    try:
        claimed = (
            db.query(ExamAssignment)
            .filter(
                ExamAssignment.id == assignment.id,
                ExamAssignment.status == AssignmentStatus.PENDING,
            )
            .update(
                {
                    ExamAssignment.status: AssignmentStatus.COMPLETED,
                    ExamAssignment.score: card.score,
                    ExamAssignment.percentage: card.percentage,
                    ExamAssignment.passed: card.passed,
                    ExamAssignment.completed_at: completed_at,
                },
                synchronize_session=False,
            )
        )
        if claimed != 1:
            db.rollback()
            raise ConflictError("Exam already submitted")

        _upsert_result(db, exam.id, student.id, card, started_at, completed_at, time_taken)
        db.commit()
    except ConflictError:
        raise
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Exam %s submitted by student %s: %d/%d (%.1f%%, %s)",
        exam.id, student.id, card.score, card.total, card.percentage, card.result,
    )
    return card, time_taken


def retry_exam(db: Session, exam_id: int, student: User) -> ExamAssignment:
    """
    Reopen a student's assignment. The stored result is kept; the next
    submission archives it before overwriting.
    """
    assignment = _get_assignment(db, exam_id, student.id)
    if not assignment:
        raise NotFoundError("Assignment not found")

    assignment.status = AssignmentStatus.PENDING
    assignment.score = None
    assignment.percentage = None
    assignment.passed = None
    assignment.started_at = None
    assignment.completed_at = None
    db.commit()
    db.refresh(assignment)

    logger.info("Assignment %s reset for retry by student %s", assignment.id, student.id)
    return assignment
