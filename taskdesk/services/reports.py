from typing import List

from sqlalchemy.orm import Session

from taskdesk.database import transaction
from taskdesk.models.report import Report
from taskdesk.schemas.report import ReportCreate
from taskdesk.services.activity import ActivityService


class ReportService:
    """Audit trail of generated report files"""

    def __init__(self, db: Session):
        self.db = db

    def record_report(self, report: ReportCreate, created_by: int) -> Report:
        db_report = Report(**report.model_dump(), created_by=created_by)
        with transaction(self.db):
            self.db.add(db_report)
            ActivityService(self.db).record(
                "REPORT",
                f"User ID: {created_by} generated a '{report.report_type}' report. {report.report_name}",
                actor_id=created_by,
                commit=False,
            )
        self.db.refresh(db_report)
        return db_report

    def list_reports(self) -> List[Report]:
        return self.db.query(Report).order_by(Report.id).all()
