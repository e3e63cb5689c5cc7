"""
Assignment ledger operations.
"""
import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exam_portal.core.errors import NotFoundError
from exam_portal.models.assignment import AssignmentStatus, ExamAssignment
from exam_portal.models.exam import Exam
from exam_portal.models.user import User, UserRole

logger = logging.getLogger(__name__)


def assign_to_all_students(db: Session, exam_id: int) -> Tuple[int, int]:
    """
    Give every current student a pending assignment for the exam.

    Students who already hold an assignment for it are skipped.

    Returns:
        (assigned count, skipped count)
    """
    exam = db.query(Exam).filter(Exam.id == exam_id).first()
    if not exam:
        raise NotFoundError("Exam not found")

    student_ids = [uid for (uid,) in db.query(User.id).filter(User.role == UserRole.STUDENT).all()]
    if not student_ids:
        raise NotFoundError("No students found to assign")

    already = {
        sid
        for (sid,) in db.query(ExamAssignment.student_id)
        .filter(ExamAssignment.exam_id == exam_id)
        .all()
    }

    assigned = 0
    for student_id in student_ids:
        if student_id in already:
            continue
        db.add(ExamAssignment(exam_id=exam_id, student_id=student_id, status=AssignmentStatus.PENDING))
        try:
            db.commit()
        except IntegrityError:
            # assigned concurrently
            db.rollback()
            continue
        assigned += 1

    skipped = len(student_ids) - assigned
    logger.info("Exam %s assigned to %d students (%d skipped)", exam_id, assigned, skipped)
    return assigned, skipped


def list_for_student(db: Session, student_id: int) -> List[ExamAssignment]:
    """Assignments newest first; rows whose exam is gone are left out."""
    return (
        db.query(ExamAssignment)
        .join(Exam, Exam.id == ExamAssignment.exam_id)
        .filter(ExamAssignment.student_id == student_id)
        .order_by(ExamAssignment.assigned_at.desc(), ExamAssignment.id.desc())
        .all()
    )
