from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from taskdesk.database import get_db
from taskdesk.schemas.project import Project, ProjectCreate, ProjectUpdate, Team
from taskdesk.schemas.task import TaskResponse
from taskdesk.services.projects import ProjectService
from taskdesk.services.tasks import TaskService
from taskdesk.services.teams import TeamService
from taskdesk.api.deps import get_or_404, raise_for_outcome

router = APIRouter()


@router.get("/", response_model=List[Project])
def read_projects(
    manager_id: Optional[int] = Query(None, description="Only projects managed by this user"),
    db: Session = Depends(get_db)
):
    """List projects, optionally for one manager"""
    service = ProjectService(db)
    if manager_id is not None:
        return service.list_for_manager(manager_id)
    return service.list_projects()


@router.post("/", response_model=Project, status_code=status.HTTP_201_CREATED)
def create_project(project: ProjectCreate, db: Session = Depends(get_db)):
    """Create a new project"""
    return ProjectService(db).create_project(project)


@router.get("/{project_id}", response_model=Project)
def read_project(project_id: int, db: Session = Depends(get_db)):
    return get_or_404(ProjectService(db).get_project(project_id), "Project")


@router.put("/{project_id}", response_model=Project)
def update_project(project_id: int, project_update: ProjectUpdate, db: Session = Depends(get_db)):
    return get_or_404(ProjectService(db).update_project(project_id, project_update), "Project")


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(project_id: int, db: Session = Depends(get_db)):
    """Delete a project with its tasks, teams, assignments and activity"""
    raise_for_outcome(ProjectService(db).delete_project(project_id), "Project")
    return None


@router.get("/{project_id}/tasks", response_model=List[TaskResponse])
def read_project_tasks(project_id: int, db: Session = Depends(get_db)):
    return TaskService(db).tasks_for_project(project_id)


@router.get("/manager/{manager_id}/teams", response_model=List[Team])
def read_manager_teams(manager_id: int, db: Session = Depends(get_db)):
    """Teams working on projects of a manager"""
    return TeamService(db).teams_for_manager(manager_id)
