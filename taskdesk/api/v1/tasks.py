from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from taskdesk.core.exceptions import not_found
from taskdesk.database import get_db
from taskdesk.schemas.task import (
    TaskResponse,
    TaskCreate,
    TaskUpdate,
    TaskStatusUpdate,
    TaskAssign,
    TaskActivityCreate,
    TaskActivityResponse,
)
from taskdesk.services.activity import ActivityService
from taskdesk.services.tasks import TaskService
from taskdesk.api.deps import actor_id_param, get_or_404, raise_for_outcome

router = APIRouter()


@router.post("/", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    actor_id: Optional[int] = Depends(actor_id_param),
    db: Session = Depends(get_db)
):
    """Create a new task"""
    return TaskService(db).create_task(task, actor_id=actor_id)


@router.get("/activity", response_model=List[TaskActivityResponse])
def read_activity(
    activity_type: Optional[str] = Query(None, description="Filter by activity tag"),
    user_id: Optional[int] = Query(None, description="Filter by acting user"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    """Activity log, newest first"""
    return ActivityService(db).filtered(
        activity_type=activity_type, user_id=user_id, start_date=start_date, end_date=end_date
    )


@router.post("/activity", response_model=TaskActivityResponse, status_code=status.HTTP_201_CREATED)
def add_activity(
    activity: TaskActivityCreate,
    actor_id: Optional[int] = Depends(actor_id_param),
    db: Session = Depends(get_db)
):
    """Append a custom entry to the activity log"""
    return ActivityService(db).record(
        activity.activity_type, activity.description, actor_id=actor_id, task_id=activity.task_id
    )


@router.get("/leader/{leader_id}", response_model=List[TaskResponse])
def read_leader_tasks(leader_id: int, db: Session = Depends(get_db)):
    """Tasks of every team led by the user"""
    return TaskService(db).tasks_for_leader(leader_id)


@router.get("/{task_id}", response_model=TaskResponse)
def read_task(task_id: int, db: Session = Depends(get_db)):
    return get_or_404(TaskService(db).get_task(task_id), "Task")


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, task_update: TaskUpdate, db: Session = Depends(get_db)):
    return get_or_404(TaskService(db).update_task(task_id, task_update), "Task")


@router.put("/{task_id}/status", response_model=TaskResponse)
def update_task_status(
    task_id: int,
    status_update: TaskStatusUpdate,
    actor_id: Optional[int] = Depends(actor_id_param),
    db: Session = Depends(get_db)
):
    service = TaskService(db)
    if not service.update_status(task_id, status_update.status, actor_id=actor_id):
        raise not_found("Task not found")
    return service.get_task(task_id)


@router.put("/{task_id}/assign", status_code=status.HTTP_204_NO_CONTENT)
def assign_task(
    task_id: int,
    assignment: TaskAssign,
    actor_id: Optional[int] = Depends(actor_id_param),
    db: Session = Depends(get_db)
):
    """Replace the assignee of a task"""
    raise_for_outcome(TaskService(db).assign_task(task_id, assignment.user_id, actor_id=actor_id), "Task")
    return None


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    """Delete a task with its assignment and activity"""
    raise_for_outcome(TaskService(db).delete_task(task_id), "Task")
    return None


@router.get("/{task_id}/activity", response_model=List[TaskActivityResponse])
def read_task_activity(task_id: int, db: Session = Depends(get_db)):
    return ActivityService(db).for_task(task_id)
