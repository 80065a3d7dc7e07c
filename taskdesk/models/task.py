from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from taskdesk.database import Base


class TaskStatus(str, enum.Enum):
    NEW = "Nowe"
    IN_PROGRESS = "W toku"
    DONE = "Zakończone"


class TaskPriority(str, enum.Enum):
    LOW = "Niskie"
    MEDIUM = "Średnie"
    HIGH = "Wysokie"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    # Free-form strings; TaskStatus/TaskPriority hold the values the app writes
    status = Column(String(50), default=TaskStatus.NEW.value)
    priority = Column(String(20), default=TaskPriority.MEDIUM.value)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    project = relationship("Project")
    team = relationship("Team")


class TaskAssignment(Base):
    __tablename__ = "task_assignments"

    task_id = Column(Integer, ForeignKey("tasks.id"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)

    task = relationship("Task")
    user = relationship("User")


class TaskActivity(Base):
    """Append-only audit log of task and system events.

    Rows are never updated. They are only removed in bulk together with
    their task. task_id is NULL for system events (login, config, ...).
    """
    __tablename__ = "task_activities"

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=True, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    activity_type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
