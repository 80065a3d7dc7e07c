import logging
from typing import List, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from taskdesk.database import bulk_execute, transaction
from taskdesk.models.project import Project, Team, TeamMember
from taskdesk.models.user import User
from taskdesk.schemas.project import TeamCreate, TeamUpdate
from taskdesk.schemas.user import TeamMemberUser
from taskdesk.services.activity import ActivityService
from taskdesk.services.outcome import MutationOutcome, report_failure

logger = logging.getLogger(__name__)


class TeamService:
    def __init__(self, db: Session):
        self.db = db

    def list_teams(self) -> List[Team]:
        return self.db.query(Team).order_by(Team.id).all()

    def create_team(self, team: TeamCreate) -> Team:
        db_team = Team(**team.model_dump())
        with transaction(self.db):
            self.db.add(db_team)
        self.db.refresh(db_team)
        return db_team

    def update_team(self, team_id: int, team_update: TeamUpdate) -> Optional[Team]:
        team = self.get_team(team_id)
        if not team:
            return None

        with transaction(self.db):
            for field, value in team_update.model_dump(exclude_unset=True).items():
                setattr(team, field, value)
        self.db.refresh(team)
        return team

    def get_team(self, team_id: int) -> Optional[Team]:
        return self.db.query(Team).filter(Team.id == team_id).first()

    def get_team_name(self, team_id: int) -> Optional[str]:
        return self.db.execute(select(Team.team_name).where(Team.id == team_id)).scalar_one_or_none()

    # Membership

    def list_members(self, team_id: int) -> List[TeamMemberUser]:
        rows = (
            self.db.query(User, TeamMember.is_leader)
            .join(TeamMember, TeamMember.user_id == User.id)
            .filter(TeamMember.team_id == team_id)
            .order_by(User.id)
            .all()
        )
        return [
            TeamMemberUser(
                id=user.id,
                name=user.name,
                last_name=user.last_name,
                email=user.email,
                role_id=user.role_id,
                is_leader=bool(is_leader),
            )
            for user, is_leader in rows
        ]

    def add_member(self, team_id: int, user_id: int, is_leader: bool = False) -> TeamMember:
        member = TeamMember(team_id=team_id, user_id=user_id, is_leader=is_leader)
        with transaction(self.db):
            self.db.add(member)
        return member

    def remove_member(self, team_id: int, user_id: int) -> bool:
        with transaction(self.db):
            removed = bulk_execute(
                self.db,
                delete(TeamMember).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id),
            )
        return removed > 0

    def is_team_leader(self, team_id: int, user_id: int) -> bool:
        flag = self.db.execute(
            select(TeamMember.is_leader).where(TeamMember.team_id == team_id, TeamMember.user_id == user_id)
        ).scalar_one_or_none()
        return bool(flag)

    def team_id_for_user(self, user_id: int) -> Optional[int]:
        """First team the user belongs to, or None."""
        return self.db.execute(
            select(TeamMember.team_id)
            .where(TeamMember.user_id == user_id)
            .order_by(TeamMember.team_id)
            .limit(1)
        ).scalar_one_or_none()

    def team_ids_for_user(self, user_id: int) -> List[int]:
        return list(self.db.execute(
            select(TeamMember.team_id).where(TeamMember.user_id == user_id).order_by(TeamMember.team_id)
        ).scalars())

    def teams_for_user(self, user_id: int) -> List[Team]:
        return (
            self.db.query(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .filter(TeamMember.user_id == user_id)
            .order_by(Team.id)
            .all()
        )

    def teams_for_manager(self, manager_id: int) -> List[Team]:
        """Teams attached to projects the user manages."""
        return (
            self.db.query(Team)
            .join(Project, Team.project_id == Project.id)
            .filter(Project.manager_id == manager_id)
            .order_by(Team.id)
            .all()
        )

    def team_ids_for_leader(self, leader_id: int) -> List[int]:
        return [team.id for team in self.teams_for_leader(leader_id)]

    def teams_for_leader(self, leader_id: int) -> List[Team]:
        return (
            self.db.query(Team)
            .join(TeamMember, TeamMember.team_id == Team.id)
            .filter(TeamMember.user_id == leader_id, TeamMember.is_leader.is_(True))
            .order_by(Team.id)
            .all()
        )

    def update_user_team(self, user_id: int, new_team_id: int, actor_id: Optional[int] = None) -> MutationOutcome:
        """Move a user to exactly one team.

        A user already on new_team_id is left untouched. Otherwise every
        membership of the user is dropped and a single non-leader row for
        new_team_id inserted, all in one transaction.
        """
        db = self.db
        try:
            with transaction(db):
                current_team_id = self.team_id_for_user(user_id)
                if current_team_id == new_team_id:
                    return MutationOutcome.SUCCESS

                if current_team_id is not None:
                    bulk_execute(db, delete(TeamMember).where(TeamMember.user_id == user_id))
                db.execute(insert(TeamMember).values(team_id=new_team_id, user_id=user_id, is_leader=False))

                if actor_id is not None:
                    ActivityService(db).log_team_management(
                        actor_id, new_team_id, "move_user",
                        f"User ID: {user_id} moved from team ID: {current_team_id}",
                        commit=False,
                    )
        except SQLAlchemyError as exc:
            return report_failure(logger, f"update_user_team({user_id}, {new_team_id})", exc)

        logger.info("User %s moved to team %s", user_id, new_team_id)
        return MutationOutcome.SUCCESS
