"""Models module - Import all models here for Alembic."""
from exam_portal.db.base import Base
from exam_portal.models.user import User
from exam_portal.models.question import Question, QuestionOption
from exam_portal.models.exam import Exam, ExamQuestion
from exam_portal.models.assignment import ExamAssignment, AssignmentStatus
from exam_portal.models.exam_result import ExamResult, ExamResultAttempt
from exam_portal.models.contact import ContactMessage

__all__ = [
    "Base",
    "User",
    "Question",
    "QuestionOption",
    "Exam",
    "ExamQuestion",
    "ExamAssignment",
    "AssignmentStatus",
    "ExamResult",
    "ExamResultAttempt",
    "ContactMessage",
]
