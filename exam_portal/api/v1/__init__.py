"""API v1 router."""
from fastapi import APIRouter

from exam_portal.api.v1 import (
    assignments,
    auth,
    contact,
    dashboard,
    exam_sessions,
    exams,
    questions,
    reports,
    results,
    statistics,
    students,
    uploads,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(students.router, prefix="/students", tags=["Student Management"])
api_router.include_router(questions.router, prefix="/questions", tags=["Question Bank"])
# exam taking and results first: /exams/history must not be read as an exam id
api_router.include_router(exam_sessions.router, prefix="/exams", tags=["Exam Taking"])
api_router.include_router(results.router, prefix="/exams", tags=["Results"])
api_router.include_router(exams.router, prefix="/exams", tags=["Exam Management"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["Assignments"])
api_router.include_router(reports.router, prefix="/admin/reports", tags=["Reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(statistics.router, prefix="/statistics", tags=["Statistics"])
api_router.include_router(contact.router, prefix="/contact", tags=["Contact"])
api_router.include_router(uploads.router, prefix="/upload", tags=["Uploads"])
