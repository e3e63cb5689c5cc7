"""
Pydantic schemas for the question bank.

A question has two read projections: the author view carries the answer key,
the taker view never does. They are separate types so the key cannot leak
through a forgotten field exclusion.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from exam_portal.schemas.common import CamelModel


# ============= Write Schemas =============

class OptionInput(CamelModel):
    """Option carrying its own correctness flag; keeps its identity on update when `id` is given."""

    id: Optional[int] = None
    text: str
    is_correct: bool = False


class QuestionCreate(CamelModel):
    """
    Single question.

    Options are either plain strings with a 0-based `correct_index`, or
    `{text, isCorrect}` objects of which exactly one is flagged.
    """

    category: str
    text: str
    options: List[Union[str, OptionInput]]
    correct_index: Optional[int] = None


class QuestionUpdate(CamelModel):
    """Full replacement of a question's category, prompt and options."""

    category: str
    text: str
    options: List[OptionInput]


class BulkQuestionRow(CamelModel):
    """One row of a bulk import; `correct_index` is 0-based."""

    category: str
    question: str
    options: List[str]
    correct_index: int


class BulkQuestionImport(CamelModel):
    """Rows are validated one by one so a bad row does not sink the batch."""

    questions: List[Dict[str, Any]] = Field(..., min_length=1)


class BulkRowError(CamelModel):
    index: int
    message: str


class BulkImportResult(CamelModel):
    inserted_count: int
    failed_count: int = 0
    errors: List[BulkRowError] = []


class BulkDelete(CamelModel):
    ids: List[int] = Field(..., min_length=1)


class BulkDeleteResult(CamelModel):
    deleted_count: int


# ============= Read Schemas =============

class OptionAuthorView(CamelModel):
    id: int
    text: str
    is_correct: bool


class QuestionAuthorView(CamelModel):
    """Question as seen by teachers, including the answer key."""

    id: int
    category: str
    text: str
    created_at: Optional[datetime] = None
    options: List[OptionAuthorView]


class OptionTakerView(CamelModel):
    id: int
    text: str


class QuestionTakerView(CamelModel):
    """Question as sent to a student taking an exam."""

    id: int
    category: str
    text: str
    options: List[OptionTakerView]


class QuestionPage(CamelModel):
    data: List[QuestionAuthorView]
    total: int


class CategoryList(CamelModel):
    categories: List[str]
