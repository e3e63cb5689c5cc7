import pytest

from exam_portal.core.errors import ConflictError
from exam_portal.db.base import SessionLocal
from exam_portal.models.assignment import AssignmentStatus, ExamAssignment
from exam_portal.models.exam_result import ExamResult
from exam_portal.services import scoring


def test_concurrent_submission_loses_the_claim(db, assigned_exam, two_questions, student):
    q1, q2 = two_questions
    answers = {q1.id: q1.options[0].id, q2.id: q2.options[1].id}

    first = SessionLocal()
    second = SessionLocal()
    try:
        # both requests have read the assignment as pending
        stale = (
            first.query(ExamAssignment)
            .filter(ExamAssignment.exam_id == assigned_exam.id, ExamAssignment.student_id == student.id)
            .one()
        )
        assert stale.status == AssignmentStatus.PENDING

        card, _ = scoring.submit_exam(second, assigned_exam.id, student, answers)
        assert card.score == 2

        with pytest.raises(ConflictError) as exc:
            scoring.submit_exam(first, assigned_exam.id, student, {q1.id: q1.options[1].id})
        assert exc.value.message == "Exam already submitted"
    finally:
        first.close()
        second.close()

    db.expire_all()
    results = db.query(ExamResult).all()
    assert len(results) == 1
    assert results[0].score == 2
    assignment = db.query(ExamAssignment).filter(ExamAssignment.exam_id == assigned_exam.id).one()
    assert assignment.status == AssignmentStatus.COMPLETED
    assert assignment.score == 2
