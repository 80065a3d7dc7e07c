import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskdesk.database import bulk_execute, transaction
from taskdesk.models.project import Project, Team, TeamMember
from taskdesk.models.task import Task, TaskAssignment, TaskActivity
from taskdesk.schemas.project import ProjectCreate, ProjectUpdate
from taskdesk.services.outcome import MutationOutcome, report_failure

logger = logging.getLogger(__name__)


class ProjectService:
    """Projects and the cascade that removes everything hanging off one."""

    def __init__(self, db: Session):
        self.db = db

    def create_project(self, project: ProjectCreate) -> Project:
        db_project = Project(**project.model_dump())
        with transaction(self.db):
            self.db.add(db_project)
        self.db.refresh(db_project)
        return db_project

    def update_project(self, project_id: int, project_update: ProjectUpdate) -> Optional[Project]:
        project = self.get_project(project_id)
        if not project:
            return None

        with transaction(self.db):
            for field, value in project_update.model_dump(exclude_unset=True).items():
                setattr(project, field, value)
        self.db.refresh(project)
        return project

    def list_projects(self) -> List[Project]:
        return self.db.query(Project).order_by(Project.id).all()

    def list_for_manager(self, manager_id: int) -> List[Project]:
        return (
            self.db.query(Project)
            .filter(Project.manager_id == manager_id)
            .order_by(Project.id)
            .all()
        )

    def get_project(self, project_id: int) -> Optional[Project]:
        return self.db.query(Project).filter(Project.id == project_id).first()

    def get_project_name(self, project_id: int) -> Optional[str]:
        return self.db.execute(
            select(Project.project_name).where(Project.id == project_id)
        ).scalar_one_or_none()

    def delete_project(self, project_id: int) -> MutationOutcome:
        """Delete a project with its tasks, teams and their dependent rows.

        Order: task assignments, task activity, tasks, team members, teams,
        project. Everything runs in one transaction; an empty task or team
        id set skips the corresponding IN-list delete altogether.
        """
        db = self.db
        try:
            with transaction(db):
                task_ids = list(db.execute(select(Task.id).where(Task.project_id == project_id)).scalars())
                team_ids = list(db.execute(select(Team.id).where(Team.project_id == project_id)).scalars())
                logger.debug(
                    "Deleting project %s: %d task(s), %d team(s)",
                    project_id, len(task_ids), len(team_ids),
                )

                if task_ids:
                    bulk_execute(db, delete(TaskAssignment).where(TaskAssignment.task_id.in_(task_ids)))
                    bulk_execute(db, delete(TaskActivity).where(TaskActivity.task_id.in_(task_ids)))
                bulk_execute(db, delete(Task).where(Task.project_id == project_id))

                if team_ids:
                    bulk_execute(db, delete(TeamMember).where(TeamMember.team_id.in_(team_ids)))
                bulk_execute(db, delete(Team).where(Team.project_id == project_id))

                removed = bulk_execute(db, delete(Project).where(Project.id == project_id))
        except SQLAlchemyError as exc:
            return report_failure(logger, f"delete_project({project_id})", exc)

        if not removed:
            logger.info("Project %s not found, nothing deleted", project_id)
            return MutationOutcome.NOT_FOUND

        logger.info("Deleted project %s", project_id)
        return MutationOutcome.SUCCESS
