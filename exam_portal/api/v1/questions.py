"""
Question bank endpoints (teachers and admins only).
"""
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.dependencies import require_staff
from exam_portal.db.base import get_db
from exam_portal.models.user import User
from exam_portal.schemas.common import Message
from exam_portal.schemas.question import (
    BulkDelete,
    BulkDeleteResult,
    BulkImportResult,
    BulkQuestionImport,
    CategoryList,
    OptionInput,
    QuestionAuthorView,
    QuestionCreate,
    QuestionPage,
    QuestionUpdate,
)
from exam_portal.services import question_bank, spreadsheet

router = APIRouter()


def _bulk_response(outcome: question_bank.BulkImportOutcome, parse_errors=None) -> JSONResponse:
    """201 when every row went in, 207 on partial success, 400 when none did."""
    errors = (list(parse_errors or []) + outcome.errors)[: settings.BULK_IMPORT_MAX_ERRORS]
    failed = outcome.failed_count + len(parse_errors or [])
    body = BulkImportResult(
        inserted_count=outcome.inserted_count, failed_count=failed, errors=errors
    )

    if failed == 0:
        code = status.HTTP_201_CREATED
    elif outcome.inserted_count > 0:
        code = status.HTTP_207_MULTI_STATUS
    else:
        code = status.HTTP_400_BAD_REQUEST
    return JSONResponse(status_code=code, content=body.model_dump(by_alias=True))


@router.get("", response_model=QuestionPage)
def list_questions(
    q: str = "",
    category: str = "",
    page: int = 1,
    page_size: int = Query(10, alias="pageSize"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    """
    Search the question bank, newest first.

    Args:
        q: Case-insensitive text filter
        category: Exact category filter
        page: 1-based page number
        page_size: Page size, clamped to 1..100
    """
    items, total = question_bank.list_questions(db, q, category, page, page_size)
    return {"data": items, "total": total}


@router.get("/categories", response_model=CategoryList)
def list_categories(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    return {"categories": question_bank.list_categories(db)}


@router.post("", response_model=QuestionAuthorView, status_code=status.HTTP_201_CREATED)
def create_question(
    question_in: QuestionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    """
    Create one question. Options are plain strings with `correctIndex`, or
    `{text, isCorrect}` objects with exactly one flagged.
    """
    options = question_in.options
    if any(isinstance(option, OptionInput) for option in options):
        flagged = [OptionInput(text=o) if isinstance(o, str) else o for o in options]
        draft = question_bank.validate_flagged_question(question_in.category, question_in.text, flagged)
    else:
        draft = question_bank.validate_question(
            question_in.category, question_in.text, options, question_in.correct_index
        )
    return question_bank.create_question(db, draft)


@router.post("/bulk", response_model=BulkImportResult, status_code=status.HTTP_201_CREATED)
def bulk_import(
    payload: BulkQuestionImport,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    """
    Import many questions at once. Each row is validated on its own; valid
    rows are stored even when others fail.
    """
    outcome = question_bank.bulk_import(db, payload.questions)
    return _bulk_response(outcome)


@router.post("/bulk/upload", response_model=BulkImportResult, status_code=status.HTTP_201_CREATED)
async def bulk_upload(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    """
    Import questions from an xlsx/xls/csv spreadsheet whose correctIndex
    column is 1-based.
    """
    content = await file.read()
    try:
        raw_rows = spreadsheet.read_rows(file.filename, content)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    rows, row_numbers, messages = spreadsheet.rows_to_questions(raw_rows)
    parse_errors = [{"index": number, "message": message} for number, message in messages]
    outcome = question_bank.bulk_import(db, rows, row_numbers=row_numbers)
    return _bulk_response(outcome, parse_errors)


@router.post("/bulk-delete", response_model=BulkDeleteResult)
def bulk_delete(
    payload: BulkDelete,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    return {"deleted_count": question_bank.bulk_delete(db, payload.ids)}


@router.get("/{question_id}", response_model=QuestionAuthorView)
def get_question(
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    return question_bank.get_question(db, question_id)


@router.put("/{question_id}", response_model=QuestionAuthorView)
def update_question(
    question_id: int,
    payload: QuestionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    return question_bank.update_question(db, question_id, payload)


@router.delete("/{question_id}", response_model=Message)
def delete_question(
    question_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    question_bank.delete_question(db, question_id)
    return {"message": "Deleted"}
