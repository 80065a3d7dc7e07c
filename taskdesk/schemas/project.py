from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date


class ProjectBase(BaseModel):
    project_name: str
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    manager_id: Optional[int] = None


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(BaseModel):
    project_name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    manager_id: Optional[int] = None


class Project(ProjectBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class TeamBase(BaseModel):
    team_name: str
    project_id: Optional[int] = None


class TeamCreate(TeamBase):
    pass


class TeamUpdate(BaseModel):
    team_name: Optional[str] = None
    project_id: Optional[int] = None


class Team(TeamBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class TeamMemberCreate(BaseModel):
    user_id: int
    is_leader: bool = False
