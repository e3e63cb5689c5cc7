"""
Question bank models.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from exam_portal.db.base import Base


class Question(Base):
    """Multiple choice question. Exactly one option is flagged correct on write."""

    __tablename__ = "questions"
    __table_args__ = (
        UniqueConstraint("category", "text", name="unique_category_text"),
    )

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, nullable=False, index=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    options = relationship(
        "QuestionOption",
        back_populates="question",
        order_by="QuestionOption.position",
        cascade="all, delete-orphan",
    )

    @property
    def correct_option(self):
        return next((o for o in self.options if o.is_correct), None)


class QuestionOption(Base):
    """Answer option of a question."""

    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    text = Column(String, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    # Relationships
    question = relationship("Question", back_populates="options")
