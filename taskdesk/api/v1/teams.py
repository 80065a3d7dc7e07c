from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from taskdesk.core.exceptions import not_found
from taskdesk.database import get_db
from taskdesk.schemas.project import Team, TeamCreate, TeamUpdate, TeamMemberCreate
from taskdesk.schemas.task import TaskResponse
from taskdesk.schemas.user import TeamMemberUser
from taskdesk.services.tasks import TaskService
from taskdesk.services.teams import TeamService
from taskdesk.api.deps import get_or_404

router = APIRouter()


@router.get("/", response_model=List[Team])
def read_teams(db: Session = Depends(get_db)):
    return TeamService(db).list_teams()


@router.post("/", response_model=Team, status_code=status.HTTP_201_CREATED)
def create_team(team: TeamCreate, db: Session = Depends(get_db)):
    return TeamService(db).create_team(team)


@router.get("/{team_id}", response_model=Team)
def read_team(team_id: int, db: Session = Depends(get_db)):
    return get_or_404(TeamService(db).get_team(team_id), "Team")


@router.put("/{team_id}", response_model=Team)
def update_team(team_id: int, team_update: TeamUpdate, db: Session = Depends(get_db)):
    return get_or_404(TeamService(db).update_team(team_id, team_update), "Team")


@router.get("/{team_id}/members", response_model=List[TeamMemberUser])
def read_team_members(team_id: int, db: Session = Depends(get_db)):
    """Members of a team with their leader flag"""
    return TeamService(db).list_members(team_id)


@router.post("/{team_id}/members", status_code=status.HTTP_201_CREATED)
def add_team_member(team_id: int, member: TeamMemberCreate, db: Session = Depends(get_db)):
    service = TeamService(db)
    get_or_404(service.get_team(team_id), "Team")
    service.add_member(team_id, member.user_id, member.is_leader)
    return {"team_id": team_id, "user_id": member.user_id, "is_leader": member.is_leader}


@router.delete("/{team_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_team_member(team_id: int, user_id: int, db: Session = Depends(get_db)):
    if not TeamService(db).remove_member(team_id, user_id):
        raise not_found("Team member not found")
    return None


@router.get("/{team_id}/tasks", response_model=List[TaskResponse])
def read_team_tasks(team_id: int, db: Session = Depends(get_db)):
    return TaskService(db).tasks_for_team(team_id)
