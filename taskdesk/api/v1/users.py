from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskdesk.database import get_db
from taskdesk.schemas.project import Team
from taskdesk.schemas.task import TaskResponse
from taskdesk.schemas.user import (
    User,
    UserCreate,
    UserUpdate,
    PasswordChange,
    UserTeamChange,
    Settings,
    SettingsUpdate,
)
from taskdesk.services.auth import AuthService
from taskdesk.services.settings import SettingsService
from taskdesk.services.tasks import TaskService
from taskdesk.services.teams import TeamService
from taskdesk.services.users import UserService
from taskdesk.api.deps import actor_id_param, get_or_404, raise_for_outcome

router = APIRouter()


@router.get("/", response_model=List[User])
def read_users(db: Session = Depends(get_db)):
    return UserService(db).list_users()


@router.get("/managers", response_model=List[User])
def read_managers(db: Session = Depends(get_db)):
    return UserService(db).list_managers()


@router.post("/", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, db: Session = Depends(get_db)):
    """Insert a user (administrator action)"""
    return UserService(db).create_user(user)


@router.get("/{user_id}", response_model=User)
def read_user(user_id: int, db: Session = Depends(get_db)):
    return get_or_404(UserService(db).get_by_id(user_id), "User")


@router.put("/{user_id}", response_model=User)
def update_user(user_id: int, user_update: UserUpdate, db: Session = Depends(get_db)):
    """Update profile fields and display settings"""
    return get_or_404(UserService(db).update_user(user_id, user_update), "User")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    raise_for_outcome(UserService(db).delete_user(user_id), "User")
    return None


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    user_id: int,
    change: PasswordChange,
    actor_id: Optional[int] = Depends(actor_id_param),
    db: Session = Depends(get_db)
):
    AuthService(db).change_password(user_id, change.new_password, change.confirm_password, actor_id=actor_id)
    return None


@router.put("/{user_id}/team", status_code=status.HTTP_204_NO_CONTENT)
def change_user_team(
    user_id: int,
    change: UserTeamChange,
    actor_id: Optional[int] = Depends(actor_id_param),
    db: Session = Depends(get_db)
):
    """Move the user to exactly one team"""
    raise_for_outcome(TeamService(db).update_user_team(user_id, change.team_id, actor_id=actor_id), "Team membership")
    return None


@router.get("/{user_id}/teams", response_model=List[Team])
def read_user_teams(user_id: int, db: Session = Depends(get_db)):
    return TeamService(db).teams_for_user(user_id)


@router.get("/{user_id}/tasks", response_model=List[TaskResponse])
def read_user_tasks(user_id: int, db: Session = Depends(get_db)):
    """Tasks assigned to the user"""
    return TaskService(db).tasks_for_user(user_id)


@router.get("/{user_id}/settings", response_model=Settings)
def read_user_settings(user_id: int, db: Session = Depends(get_db)):
    return get_or_404(SettingsService(db).get_for_user(user_id), "Settings")


@router.put("/{user_id}/settings", response_model=Settings)
def update_user_settings(user_id: int, update: SettingsUpdate, db: Session = Depends(get_db)):
    get_or_404(UserService(db).get_by_id(user_id), "User")
    return SettingsService(db).update_settings(user_id, update)
