from .user import User, UserCreate, UserUpdate, UserRegister, UserLogin, Settings
from .project import Project, ProjectCreate, ProjectUpdate, Team, TeamCreate, TeamUpdate
from .task import TaskResponse, TaskCreate, TaskUpdate, TaskActivityResponse
from .report import Report, ReportCreate

__all__ = [
    "User", "UserCreate", "UserUpdate", "UserRegister", "UserLogin", "Settings",
    "Project", "ProjectCreate", "ProjectUpdate", "Team", "TeamCreate", "TeamUpdate",
    "TaskResponse", "TaskCreate", "TaskUpdate", "TaskActivityResponse",
    "Report", "ReportCreate",
]
