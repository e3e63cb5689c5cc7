"""
Staff reports over exam results.
"""
import csv
import io
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from exam_portal.core.dependencies import require_staff
from exam_portal.db.base import get_db
from exam_portal.models.user import User
from exam_portal.schemas.result import ExamReport
from exam_portal.services import reporting

router = APIRouter()

CSV_COLUMNS = [
    ("Student ID", "student_id"),
    ("Student Name", "student_name"),
    ("Email", "email"),
    ("Marks Obtained", "marks_obtained"),
    ("Total Marks", "total_marks"),
    ("Percentage", "percentage"),
    ("Status", "status"),
    ("Completed At", "completed_at"),
]


def _to_csv(report: dict) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([title for title, _ in CSV_COLUMNS])
    for row in report["results"]:
        values = []
        for _, key in CSV_COLUMNS:
            value = row[key]
            if key == "percentage":
                value = f"{value:.2f}"
            elif key == "completed_at":
                value = value.isoformat() if value else ""
            values.append(value)
        writer.writerow(values)
    return buffer.getvalue()


@router.get("/exam-results/{exam_id}", response_model=ExamReport)
def exam_results(
    exam_id: int,
    format: str = Query("json", pattern="^(json|csv)$"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
) -> Any:
    """
    Results of every student on an exam, best score first.

    `?format=csv` downloads the same rows as a CSV file.
    """
    report = reporting.exam_report(db, exam_id)
    if format == "csv":
        return StreamingResponse(
            iter([_to_csv(report)]),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="exam-{exam_id}-results.csv"'},
        )
    return report
