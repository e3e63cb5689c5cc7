"""
Pydantic schemas for submissions, results and reports.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from exam_portal.schemas.common import CamelModel


# ============= Submission =============

class ExamSubmit(CamelModel):
    """
    Answers keyed by question id, valued by the chosen option id.

    ```json
    {"answers": {"12": 40, "13": 47}, "timeTaken": 312}
    ```

    Questions left out of the map are unanswered. `timeTaken` is only used
    when it is a number.
    """

    answers: Dict[int, Optional[int]] = Field(default_factory=dict)
    time_taken: Optional[Any] = None


class ReviewItem(CamelModel):
    question_id: int
    question: str
    selected_text: str
    correct_text: str
    correct: bool


class SubmissionResult(CamelModel):
    message: str
    score: int
    total: int
    percentage: float
    passed: bool
    correct_answers: int
    wrong_answers: int
    time_taken_seconds: int
    review: List[ReviewItem]


# ============= Results =============

class ResultSummary(CamelModel):
    score: int
    total_questions: int
    percentage: float
    result: str
    correct_answers: int
    wrong_answers: int
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    time_taken_seconds: Optional[int] = None


class ExamHeader(CamelModel):
    id: int
    title: str
    category: str
    duration: int
    pass_percentage: float


class HistoryEntry(ResultSummary):
    exam_id: int
    title: str
    category: str
    duration: int
    pass_percentage: float


class History(CamelModel):
    history: List[HistoryEntry]


class ExamResultDetail(HistoryEntry):
    pass


class AttemptEntry(ResultSummary):
    attempt_number: int
    latest: bool


class AttemptHistory(CamelModel):
    exam_id: int
    attempts: List[AttemptEntry]


class ReviewOption(CamelModel):
    id: int
    text: str


class ReviewQuestion(CamelModel):
    question_id: int
    question: str
    options: List[ReviewOption]
    selected_option_id: Optional[int] = None
    correct_option_id: Optional[int] = None
    is_correct: bool


class ExamReview(CamelModel):
    exam: ExamHeader
    summary: ResultSummary
    review: List[ReviewQuestion]


# ============= Staff Reports =============

class ReportRow(CamelModel):
    student_id: int
    student_name: str
    email: str
    marks_obtained: int
    total_marks: int
    percentage: float
    status: str
    completed_at: Optional[datetime] = None


class ExamReport(CamelModel):
    exam: ExamHeader
    results: List[ReportRow]
