"""
Public statistics.
"""
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.db.base import get_db
from exam_portal.schemas.dashboard import ImpactStats
from exam_portal.services import reporting

router = APIRouter()


@router.get("/impact", response_model=ImpactStats)
def impact(db: Session = Depends(get_db)) -> Any:
    """Answers recorded across all latest results and the paper they stand for."""
    return reporting.impact_statistics(db)
