from .user import Role, Group, User, Settings
from .project import Project, Team, TeamMember
from .task import Task, TaskAssignment, TaskActivity, TaskStatus, TaskPriority
from .report import Report

__all__ = [
    "Role", "Group", "User", "Settings",
    "Project", "Team", "TeamMember",
    "Task", "TaskAssignment", "TaskActivity", "TaskStatus", "TaskPriority",
    "Report",
]
