"""
Pydantic schemas for dashboards and contact messages.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from exam_portal.schemas.common import CamelModel


class DashboardExam(CamelModel):
    id: int
    title: str
    category: str
    duration: int
    pass_percentage: float
    question_count: int
    status: str
    assigned_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    score: Optional[int] = None
    percentage: Optional[float] = None
    passed: Optional[bool] = None


class StudentStats(CamelModel):
    total_upcoming: int
    total_completed: int
    average_score: int


class StudentDashboard(CamelModel):
    upcoming_exams: List[DashboardExam]
    completed_exams: List[DashboardExam]
    stats: StudentStats


class AdminStats(CamelModel):
    total_students: int
    active_exams: int
    categories: int
    completion_rate: int
    avg_score: int


class RecentActivity(CamelModel):
    exam_id: int
    student_id: int
    title: str
    completed_at: Optional[datetime] = None


class AdminDashboard(CamelModel):
    stats: AdminStats
    recent_activity: List[RecentActivity]


class ContactCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    message: str = Field(..., min_length=1)


class UploadResult(CamelModel):
    success: bool
    url: str
    filename: str


class ImpactStats(CamelModel):
    total_answers: int
    questions_per_sheet: int
    sheets_per_tree: int
    trees_saved: float
