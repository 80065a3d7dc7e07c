from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from taskdesk.models.task import TaskActivity


class ActivityService:
    """Append-only task/system activity log.

    Rows are never updated or deleted one by one; they go away only with the
    task they describe.
    """

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        activity_type: str,
        description: str,
        actor_id: Optional[int] = None,
        task_id: Optional[int] = None,
        commit: bool = True,
    ) -> TaskActivity:
        """Write one activity row.

        With ``commit=False`` the row joins the caller's open transaction.
        """
        entry = TaskActivity(
            task_id=task_id,
            user_id=actor_id,
            activity_type=activity_type,
            description=description,
        )
        self.db.add(entry)
        if commit:
            self.db.commit()
            self.db.refresh(entry)
        else:
            self.db.flush()
        return entry

    # Task events

    def log_task_creation(self, task_id: int, title: str, assigned_user_id: Optional[int],
                          actor_id: Optional[int] = None, commit: bool = True):
        desc = f'Created task "{title}"'
        if assigned_user_id:
            desc += f" and assigned it to user ID: {assigned_user_id}"
        return self.record("CREATE", desc, actor_id=actor_id, task_id=task_id, commit=commit)

    def log_status_change(self, task_id: int, title: str, old_status: str, new_status: str,
                          actor_id: Optional[int] = None, commit: bool = True):
        return self.record(
            "STATUS",
            f'Changed status of task "{title}" from "{old_status}" to "{new_status}"',
            actor_id=actor_id,
            task_id=task_id,
            commit=commit,
        )

    def log_assignment(self, task_id: int, title: str, old_user_id: Optional[int], new_user_id: int,
                       actor_id: Optional[int] = None, commit: bool = True):
        if old_user_id:
            desc = f'Reassigned task "{title}" from user ID: {old_user_id} to user ID: {new_user_id}'
        else:
            desc = f'Assigned task "{title}" to user ID: {new_user_id}'
        return self.record("ASSIGN", desc, actor_id=actor_id, task_id=task_id, commit=commit)

    def log_task_update(self, task_id: int, title: str, field_name: str, old_value, new_value, actor_id: Optional[int] = None):
        return self.record(
            "UPDATE",
            f'Updated field "{field_name}" of task "{title}" from "{old_value}" to "{new_value}"',
            actor_id=actor_id,
            task_id=task_id,
        )

    def log_comment(self, task_id: int, title: str, comment: str, actor_id: Optional[int] = None):
        return self.record("COMMENT", f'Commented on task "{title}": {comment}', actor_id=actor_id, task_id=task_id)

    # System events

    def log_password_change(self, user_id: int, changed_by_admin: bool, actor_id: Optional[int] = None,
                            commit: bool = True):
        if changed_by_admin:
            desc = f"Administrator reset the password of user ID: {user_id}"
        else:
            desc = f"User ID: {user_id} changed their password"
        return self.record("PASSWORD", desc, actor_id=actor_id or user_id, commit=commit)

    def log_login(self, user_id: int):
        return self.record("LOGIN", f"User ID: {user_id} logged in", actor_id=user_id)

    def log_logout(self, user_id: int):
        return self.record("LOGOUT", f"User ID: {user_id} logged out", actor_id=user_id)

    def log_user_management(self, admin_id: int, target_user_id: int, action: str, details: str = ""):
        return self.record(
            "USER_MANAGEMENT",
            f"Administrator ID: {admin_id} performed '{action}' on user ID: {target_user_id}. {details}".strip(),
            actor_id=admin_id,
        )

    def log_team_management(self, actor_id: int, team_id: int, action: str, details: str = "", commit: bool = True):
        return self.record(
            "TEAM_MANAGEMENT",
            f"User ID: {actor_id} performed '{action}' on team ID: {team_id}. {details}".strip(),
            actor_id=actor_id,
            commit=commit,
        )

    def log_report_generation(self, actor_id: int, report_type: str, details: str = ""):
        return self.record(
            "REPORT",
            f"User ID: {actor_id} generated a '{report_type}' report. {details}".strip(),
            actor_id=actor_id,
        )

    def log_config_change(self, admin_id: int, setting: str, old_value, new_value):
        return self.record(
            "CONFIG",
            f"Administrator ID: {admin_id} changed '{setting}' from '{old_value}' to '{new_value}'",
            actor_id=admin_id,
        )

    # Queries, newest first

    def _newest_first(self, query):
        return query.order_by(TaskActivity.created_at.desc(), TaskActivity.id.desc()).all()

    def all_activities(self) -> List[TaskActivity]:
        return self._newest_first(self.db.query(TaskActivity))

    def for_task(self, task_id: int) -> List[TaskActivity]:
        return self._newest_first(self.db.query(TaskActivity).filter(TaskActivity.task_id == task_id))

    def for_user(self, user_id: int) -> List[TaskActivity]:
        return self._newest_first(self.db.query(TaskActivity).filter(TaskActivity.user_id == user_id))

    def by_type(self, activity_type: str) -> List[TaskActivity]:
        return self._newest_first(self.db.query(TaskActivity).filter(TaskActivity.activity_type == activity_type))

    def between(self, start_date: date, end_date: date) -> List[TaskActivity]:
        """Activities whose day falls within [start_date, end_date]."""
        return self.filtered(start_date=start_date, end_date=end_date)

    def filtered(
        self,
        activity_type: Optional[str] = None,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TaskActivity]:
        query = self.db.query(TaskActivity)

        if activity_type:
            query = query.filter(TaskActivity.activity_type == activity_type)
        if user_id:
            query = query.filter(TaskActivity.user_id == user_id)
        if start_date:
            query = query.filter(TaskActivity.created_at >= datetime.combine(start_date, time.min))
        if end_date:
            query = query.filter(TaskActivity.created_at < datetime.combine(end_date + timedelta(days=1), time.min))

        return self._newest_first(query)
