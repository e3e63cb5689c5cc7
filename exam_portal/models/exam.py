"""
Exam definition models.
"""
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exam_portal.db.base import Base


class Exam(Base):
    """A named, ordered collection of questions with its exam parameters."""

    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # minutes
    pass_percentage = Column(Float, nullable=False)
    is_active = Column(Boolean, default=True)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    exam_questions = relationship(
        "ExamQuestion",
        back_populates="exam",
        order_by="ExamQuestion.position",
        cascade="all, delete-orphan",
    )
    creator = relationship("User")

    @property
    def questions(self):
        """Questions in list order; repeats are kept."""
        return [eq.question for eq in self.exam_questions if eq.question is not None]


class ExamQuestion(Base):
    """Ordered question reference of an exam."""

    __tablename__ = "exam_questions"

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # Relationships
    exam = relationship("Exam", back_populates="exam_questions")
    question = relationship("Question")
