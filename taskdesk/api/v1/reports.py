from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from taskdesk.database import get_db
from taskdesk.schemas.report import Report, ReportCreate
from taskdesk.services.reports import ReportService

router = APIRouter()


@router.get("/", response_model=List[Report])
def read_reports(db: Session = Depends(get_db)):
    return ReportService(db).list_reports()


@router.post("/", response_model=Report, status_code=status.HTTP_201_CREATED)
def record_report(
    report: ReportCreate,
    created_by: int = Query(..., description="User who generated the report"),
    db: Session = Depends(get_db)
):
    """Record that a report file was generated"""
    return ReportService(db).record_report(report, created_by)
