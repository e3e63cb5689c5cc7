"""
Spreadsheet parsing for question bank imports.

Expected columns: category, question (or text), option1..option20 and
correctIndex. The spreadsheet's correctIndex is 1-based.
"""
import io
import logging
import math
from typing import Any, Dict, List, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

MAX_OPTIONS = 20
SPREADSHEET_EXTENSIONS = (".xlsx", ".xls", ".csv")


def _cell(row: Dict[str, Any], *names: str) -> str:
    for name in names:
        value = row.get(name)
        if value is None or (isinstance(value, float) and math.isnan(value)):
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def _number(raw: str):
    try:
        value = float(raw)
    except ValueError:
        return None
    return int(value) if value.is_integer() else value


def read_rows(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """
    Read the first sheet of a workbook (or a CSV file) into plain dict rows.

    Raises:
        ValueError: If the file type is not supported or cannot be parsed
    """
    name = (filename or "").lower()
    if not name.endswith(SPREADSHEET_EXTENSIONS):
        raise ValueError(f"Unsupported file type. Allowed: {', '.join(SPREADSHEET_EXTENSIONS)}")

    try:
        if name.endswith(".csv"):
            df = pd.read_csv(io.BytesIO(content), dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=str)
    except Exception as e:
        raise ValueError(f"Could not read spreadsheet: {str(e)}")

    df.columns = [str(c).strip() for c in df.columns]
    return df.to_dict(orient="records")


def rows_to_questions(raw_rows: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[int], List[Tuple[int, str]]]:
    """
    Turn spreadsheet rows into bulk-import rows with a 0-based correct index.

    Returns:
        (rows, row_numbers, errors) where row_numbers are spreadsheet row numbers
        (header is row 1) and errors are (row number, "Row N: ...") pairs
    """
    rows, row_numbers, errors = [], [], []

    for idx, raw in enumerate(raw_rows):
        row_number = idx + 2
        category = _cell(raw, "category", "Category")
        question = _cell(raw, "question", "Question", "text")

        options = []
        for i in range(1, MAX_OPTIONS + 1):
            value = _cell(raw, f"option{i}", f"Option {i}", f"Option{i}", f"opt{i}")
            if value:
                options.append(value)

        correct_raw = _cell(raw, "correctIndex", "correctindex", "correct", "CorrectIndex")
        correct_index = _number(correct_raw) if correct_raw else None

        problems = []
        if not category:
            problems.append("category missing")
        if not question:
            problems.append("question missing")
        if len(options) < 2:
            problems.append("need at least 2 options")

        if correct_index is None:
            problems.append("correctIndex missing")
        else:
            if 0 < correct_index <= len(options):
                correct_index = correct_index - 1
            if not (isinstance(correct_index, int) and 0 <= correct_index < len(options)):
                problems.append("correctIndex out of range")

        if problems:
            errors.append((row_number, f"Row {row_number}: {'; '.join(problems)}"))
            continue

        rows.append({
            "category": category,
            "question": question,
            "options": options,
            "correctIndex": correct_index,
        })
        row_numbers.append(row_number)

    logger.info("Parsed spreadsheet: %d valid rows, %d invalid", len(rows), len(errors))
    return rows, row_numbers, errors
