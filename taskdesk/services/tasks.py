import logging
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskdesk.database import bulk_execute, transaction
from taskdesk.models.project import Team, TeamMember
from taskdesk.models.task import Task, TaskAssignment, TaskActivity
from taskdesk.models.user import User
from taskdesk.schemas.task import TaskCreate, TaskUpdate, TaskResponse
from taskdesk.services.activity import ActivityService
from taskdesk.services.outcome import MutationOutcome, report_failure

logger = logging.getLogger(__name__)


class TaskService:
    """Tasks, their single assignee and their removal."""

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityService(db)

    def create_task(self, task: TaskCreate, actor_id: Optional[int] = None) -> Task:
        db_task = Task(**task.model_dump())
        with transaction(self.db):
            self.db.add(db_task)
            self.db.flush()
            self.activity.log_task_creation(db_task.id, db_task.title, None, actor_id=actor_id, commit=False)
        self.db.refresh(db_task)
        return db_task

    def update_task(self, task_id: int, task_update: TaskUpdate) -> Optional[Task]:
        task = self.get_task(task_id)
        if not task:
            return None

        with transaction(self.db):
            for field, value in task_update.model_dump(exclude_unset=True).items():
                setattr(task, field, value)
        self.db.refresh(task)
        return task

    def update_status(self, task_id: int, new_status: str, actor_id: Optional[int] = None) -> bool:
        task = self.get_task(task_id)
        if not task:
            return False

        old_status = task.status
        with transaction(self.db):
            task.status = new_status
            if old_status != new_status:
                self.activity.log_status_change(
                    task_id, task.title, old_status, new_status, actor_id=actor_id, commit=False
                )
        return True

    def get_task(self, task_id: int) -> Optional[Task]:
        return self.db.query(Task).filter(Task.id == task_id).first()

    # Listings with team name and assignee

    def _listing(self):
        return (
            self.db.query(Task, Team.team_name, User.id, User.email)
            .outerjoin(Team, Task.team_id == Team.id)
            .outerjoin(TaskAssignment, TaskAssignment.task_id == Task.id)
            .outerjoin(User, TaskAssignment.user_id == User.id)
        )

    @staticmethod
    def _to_response(row) -> TaskResponse:
        task, team_name, assigned_id, assigned_email = row
        response = TaskResponse.model_validate(task)
        response.team_name = team_name
        if assigned_email is not None:
            response.assigned_to = assigned_id
            response.assigned_email = assigned_email
        return response

    def tasks_for_project(self, project_id: int) -> List[TaskResponse]:
        rows = self._listing().filter(Task.project_id == project_id).order_by(Task.id).all()
        return [self._to_response(row) for row in rows]

    def tasks_for_team(self, team_id: int) -> List[TaskResponse]:
        rows = self._listing().filter(Task.team_id == team_id).order_by(Task.id).all()
        return [self._to_response(row) for row in rows]

    def tasks_for_leader(self, leader_id: int) -> List[TaskResponse]:
        """Tasks of every team the user leads."""
        rows = (
            self._listing()
            .join(TeamMember, TeamMember.team_id == Task.team_id)
            .filter(TeamMember.user_id == leader_id, TeamMember.is_leader.is_(True))
            .order_by(Task.id)
            .all()
        )
        return [self._to_response(row) for row in rows]

    def tasks_for_user(self, user_id: int) -> List[TaskResponse]:
        rows = self._listing().filter(TaskAssignment.user_id == user_id).order_by(Task.id).all()
        return [self._to_response(row) for row in rows]

    def colleague_tasks(self, user_id: int, team_id: int) -> List[TaskResponse]:
        """Assigned tasks of a team, excluding the ones held by user_id."""
        rows = (
            self._listing()
            .filter(
                Task.team_id == team_id,
                TaskAssignment.user_id.is_not(None),
                TaskAssignment.user_id != user_id,
            )
            .order_by(Task.id)
            .all()
        )
        return [self._to_response(row) for row in rows]

    def assigned_user_id(self, task_id: int) -> Optional[int]:
        return self.db.execute(
            select(TaskAssignment.user_id).where(TaskAssignment.task_id == task_id).limit(1)
        ).scalar_one_or_none()

    def assigned_user_email(self, task_id: int) -> Optional[str]:
        return self.db.execute(
            select(User.email)
            .join(TaskAssignment, TaskAssignment.user_id == User.id)
            .where(TaskAssignment.task_id == task_id)
            .limit(1)
        ).scalar_one_or_none()

    # Transactional mutations

    def assign_task(self, task_id: int, user_id: int, actor_id: Optional[int] = None) -> MutationOutcome:
        """Make user_id the only assignee of the task.

        Any existing assignment is deleted and a fresh row inserted in the
        same transaction.
        """
        db = self.db
        try:
            with transaction(db):
                title = db.execute(select(Task.title).where(Task.id == task_id)).scalar_one_or_none()
                if title is None:
                    return MutationOutcome.NOT_FOUND

                previous = self.assigned_user_id(task_id)
                bulk_execute(db, delete(TaskAssignment).where(TaskAssignment.task_id == task_id))
                db.execute(insert(TaskAssignment).values(task_id=task_id, user_id=user_id))
                self.activity.log_assignment(task_id, title, previous, user_id, actor_id=actor_id, commit=False)
        except SQLAlchemyError as exc:
            return report_failure(logger, f"assign_task({task_id}, {user_id})", exc)

        logger.info("Task %s assigned to user %s", task_id, user_id)
        return MutationOutcome.SUCCESS

    def delete_task(self, task_id: int) -> MutationOutcome:
        """Delete a task together with its assignment and activity rows."""
        db = self.db
        try:
            with transaction(db):
                bulk_execute(db, delete(TaskAssignment).where(TaskAssignment.task_id == task_id))
                bulk_execute(db, delete(TaskActivity).where(TaskActivity.task_id == task_id))
                removed = bulk_execute(db, delete(Task).where(Task.id == task_id))
        except SQLAlchemyError as exc:
            return report_failure(logger, f"delete_task({task_id})", exc)

        if not removed:
            logger.info("Task %s not found, nothing deleted", task_id)
            return MutationOutcome.NOT_FOUND

        logger.info("Deleted task %s", task_id)
        return MutationOutcome.SUCCESS
