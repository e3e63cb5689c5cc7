"""
Pydantic schemas for exam definitions and assignments.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from exam_portal.schemas.common import CamelModel
from exam_portal.schemas.question import QuestionAuthorView, QuestionTakerView


class ExamCreate(CamelModel):
    """Schema for creating an exam."""

    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1, description="Duration in minutes")
    pass_percentage: float = Field(..., ge=0, le=100)
    questions: List[int] = Field(..., min_length=1, description="Ordered question ids")
    is_active: bool = True

    @field_validator("title", "category")
    @classmethod
    def strip_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ExamActiveUpdate(CamelModel):
    is_active: bool


class ExamSummary(CamelModel):
    """Exam listing row."""

    id: int
    title: str
    category: str
    duration: int
    pass_percentage: float
    is_active: bool
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    question_count: int


class ExamDetail(ExamSummary):
    """Exam with its questions and answer key, for staff."""

    questions: List[QuestionAuthorView]


class ExamTakerView(CamelModel):
    """Exam content sent to a student; the answer key is never included."""

    id: int
    title: str
    category: str
    duration: int
    pass_percentage: float
    questions: List[QuestionTakerView]


class ExamStart(CamelModel):
    exam: ExamTakerView
    started_at: datetime
    time_remaining_seconds: int


class ExamStats(CamelModel):
    total_exams: int
    active_exams: int
    total_questions: int
    avg_pass_rate: int


# ============= Assignments =============

class AssignmentCreate(CamelModel):
    exam_id: int


class AssignmentFanOut(CamelModel):
    message: str
    assigned_count: int
    skipped_count: int


class AssignedExam(CamelModel):
    id: int
    title: str
    category: str
    duration: int
    pass_percentage: float
    question_count: int


class Assignment(CamelModel):
    id: int
    exam: AssignedExam
    status: str
    assigned_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    score: Optional[int] = None
    percentage: Optional[float] = None
    passed: Optional[bool] = None


class AssignmentList(CamelModel):
    assignments: List[Assignment]
