"""
Assignment ledger: one row per (student, exam) pair.
"""
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exam_portal.db.base import Base


class AssignmentStatus:
    PENDING = "pending"
    COMPLETED = "completed"


class ExamAssignment(Base):
    """Workflow gate deciding whether a student may take an exam."""

    __tablename__ = "exam_assignments"
    __table_args__ = (
        UniqueConstraint("exam_id", "student_id", name="unique_exam_student_assignment"),
    )

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(String, nullable=False, default=AssignmentStatus.PENDING)
    score = Column(Integer, nullable=True)
    percentage = Column(Float, nullable=True)
    passed = Column(Boolean, nullable=True)

    assigned_at = Column(DateTime(timezone=True), server_default=func.now())
    started_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    exam = relationship("Exam")
    student = relationship("User")
