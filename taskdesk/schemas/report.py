from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class ReportCreate(BaseModel):
    report_name: str
    report_type: str
    report_scope: Optional[str] = None
    exported_file: Optional[str] = None


class Report(ReportCreate):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_by: int
    created_at: Optional[datetime] = None
