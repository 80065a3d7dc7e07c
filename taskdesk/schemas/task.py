from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime
from taskdesk.models.task import TaskStatus, TaskPriority


class TaskBase(BaseModel):
    project_id: int
    team_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    status: str = TaskStatus.NEW.value
    priority: str = TaskPriority.MEDIUM.value
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(BaseModel):
    project_id: Optional[int] = None
    team_id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class TaskStatusUpdate(BaseModel):
    status: str


class TaskAssign(BaseModel):
    user_id: int


class TaskResponse(TaskBase):
    model_config = ConfigDict(from_attributes=True)

    id: int

    # Filled by the listing queries
    team_name: Optional[str] = None
    assigned_to: Optional[int] = None
    assigned_email: Optional[str] = None


class TaskActivityCreate(BaseModel):
    task_id: Optional[int] = None
    activity_type: str
    description: Optional[str] = None


class TaskActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    task_id: Optional[int] = None
    user_id: Optional[int] = None
    activity_type: str
    description: Optional[str] = None
    created_at: datetime
