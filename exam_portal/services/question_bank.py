"""
Question bank operations and the validation contract shared by single
creation, updates and bulk imports.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.errors import ConflictError, NotFoundError, ValidationFailedError
from exam_portal.models.exam import ExamQuestion
from exam_portal.models.question import Question, QuestionOption
from exam_portal.schemas.question import BulkQuestionRow, OptionInput, QuestionUpdate

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Duplicate question (category + text)"


@dataclass
class QuestionDraft:
    """A question that passed validation, with trimmed fields."""

    category: str
    text: str
    options: List[str]
    correct_index: int


@dataclass
class BulkImportOutcome:
    inserted_count: int = 0
    failed_count: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def add_error(self, index: int, message: str) -> None:
        self.failed_count += 1
        if len(self.errors) < settings.BULK_IMPORT_MAX_ERRORS:
            self.errors.append({"index": index, "message": message})


def validate_question(
    category: Optional[str],
    text: Optional[str],
    options: Sequence[Optional[str]],
    correct_index: Any,
) -> QuestionDraft:
    """
    Validate a question and normalise its fields.

    Raises:
        ValidationFailedError: With the first failing rule's message
    """
    category = (category or "").strip()
    if not category:
        raise ValidationFailedError("Category is required")

    text = (text or "").strip()
    if not text:
        raise ValidationFailedError("Question text is required")

    options = list(options or [])
    if len(options) < 2:
        raise ValidationFailedError("At least 2 options required")

    cleaned = []
    for position, option in enumerate(options, start=1):
        option_text = (option or "").strip()
        if not option_text:
            raise ValidationFailedError(f"Option {position} text is required")
        cleaned.append(option_text)

    if isinstance(correct_index, bool) or not isinstance(correct_index, int):
        raise ValidationFailedError("Correct option index must be an integer")
    if not 0 <= correct_index < len(cleaned):
        raise ValidationFailedError("Correct option index out of range")

    return QuestionDraft(category=category, text=text, options=cleaned, correct_index=correct_index)


def validate_flagged_question(
    category: Optional[str],
    text: Optional[str],
    options: Sequence[OptionInput],
) -> QuestionDraft:
    """Validate a question whose options carry their own `is_correct` flags."""
    correct_count = sum(1 for option in options if option.is_correct)
    if correct_count == 0:
        raise ValidationFailedError("Select a correct option")
    if correct_count > 1:
        raise ValidationFailedError("Only one correct option allowed")

    correct_index = next(i for i, option in enumerate(options) if option.is_correct)
    return validate_question(category, text, [option.text for option in options], correct_index)


def _build_question(draft: QuestionDraft) -> Question:
    return Question(
        category=draft.category,
        text=draft.text,
        options=[
            QuestionOption(position=i, text=option_text, is_correct=i == draft.correct_index)
            for i, option_text in enumerate(draft.options)
        ],
    )


def _exists(db: Session, category: str, text: str, exclude_id: Optional[int] = None) -> bool:
    query = db.query(Question.id).filter(Question.category == category, Question.text == text)
    if exclude_id is not None:
        query = query.filter(Question.id != exclude_id)
    return query.first() is not None


def get_question(db: Session, question_id: int) -> Question:
    question = db.query(Question).filter(Question.id == question_id).first()
    if not question:
        raise NotFoundError("Question not found")
    return question


def list_questions(
    db: Session,
    q: str = "",
    category: str = "",
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[Question], int]:
    """Newest first, filtered by a case-insensitive text match and category."""
    page = max(1, page)
    page_size = max(1, min(100, page_size))

    query = db.query(Question)
    q = (q or "").strip()
    category = (category or "").strip()
    if q:
        query = query.filter(Question.text.ilike(f"%{q}%"))
    if category:
        query = query.filter(Question.category == category)

    total = query.count()
    items = (
        query.order_by(Question.created_at.desc(), Question.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return items, total


def list_categories(db: Session) -> List[str]:
    rows = db.query(Question.category).distinct().all()
    return sorted({c for (c,) in rows if c and c.strip()})


def create_question(db: Session, draft: QuestionDraft) -> Question:
    if _exists(db, draft.category, draft.text):
        raise ConflictError(DUPLICATE_MESSAGE)

    question = _build_question(draft)
    db.add(question)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_MESSAGE)
    db.refresh(question)
    return question


def bulk_import(
    db: Session,
    rows: Sequence[Dict[str, Any]],
    row_numbers: Optional[Sequence[int]] = None,
) -> BulkImportOutcome:
    """
    Insert every valid row; invalid or duplicate rows become per-row errors.

    Args:
        db: Database session
        rows: Raw rows with category, question, options and 0-based correctIndex
        row_numbers: Labels used in error reports instead of list positions

    Returns:
        Inserted count plus a bounded list of row errors
    """
    outcome = BulkImportOutcome()
    seen = set()

    for position, raw in enumerate(rows):
        index = row_numbers[position] if row_numbers is not None else position
        prefix = f"Row {index}: " if row_numbers is not None else ""

        try:
            row = BulkQuestionRow.model_validate(raw)
            draft = validate_question(row.category, row.question, row.options, row.correct_index)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            outcome.add_error(index, f"{prefix}{location}: {first['msg']}")
            continue
        except ValidationFailedError as e:
            outcome.add_error(index, f"{prefix}{e.message}")
            continue

        key = (draft.category, draft.text)
        if key in seen or _exists(db, *key):
            outcome.add_error(index, f"{prefix}{DUPLICATE_MESSAGE}")
            continue

        # each row commits on its own
        db.add(_build_question(draft))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            outcome.add_error(index, f"{prefix}{DUPLICATE_MESSAGE}")
            continue

        seen.add(key)
        outcome.inserted_count += 1

    logger.info(
        "Bulk question import: %d inserted, %d failed", outcome.inserted_count, outcome.failed_count
    )
    return outcome


def update_question(db: Session, question_id: int, payload: QuestionUpdate) -> Question:
    """
    Replace category, prompt and options of a question.

    Nothing is written unless the payload passes validation.
    """
    question = get_question(db, question_id)
    draft = validate_flagged_question(payload.category, payload.text, payload.options)

    if _exists(db, draft.category, draft.text, exclude_id=question.id):
        raise ConflictError(DUPLICATE_MESSAGE)

    existing = {option.id: option for option in question.options}
    replacement = []
    for position, (incoming, option_text) in enumerate(zip(payload.options, draft.options)):
        option = existing.pop(incoming.id, None) if incoming.id is not None else None
        if option is None:
            option = QuestionOption()
        option.position = position
        option.text = option_text
        option.is_correct = position == draft.correct_index
        replacement.append(option)

    question.category = draft.category
    question.text = draft.text
    question.options = replacement

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(DUPLICATE_MESSAGE)
    db.refresh(question)
    return question


def _detach_from_exams(db: Session, question_ids: Sequence[int]) -> None:
    db.query(ExamQuestion).filter(ExamQuestion.question_id.in_(question_ids)).delete(
        synchronize_session=False
    )


def delete_question(db: Session, question_id: int) -> None:
    question = get_question(db, question_id)
    _detach_from_exams(db, [question.id])
    db.delete(question)
    db.commit()


def bulk_delete(db: Session, question_ids: Sequence[int]) -> int:
    questions = db.query(Question).filter(Question.id.in_(question_ids)).all()
    if questions:
        _detach_from_exams(db, [q.id for q in questions])
        for question in questions:
            db.delete(question)
        db.commit()
    return len(questions)


def count_questions(db: Session) -> int:
    return db.query(func.count(Question.id)).scalar() or 0
