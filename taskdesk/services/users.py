import logging
from typing import Dict, List, Optional, Union

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskdesk.core.exceptions import ResourceConflictError
from taskdesk.core.security import hash_password
from taskdesk.database import bulk_execute, transaction
from taskdesk.models.user import Group, Role, Settings, User
from taskdesk.schemas.user import SettingsUpdate, UserCreate, UserSignup, UserUpdate
from taskdesk.services.outcome import MutationOutcome, report_failure
from taskdesk.services.roles import MANAGER_ROLE_ID
from taskdesk.services.settings import SettingsService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def create_user(self, user: Union[UserCreate, UserSignup]) -> User:
        """Insert a user; the raw password is stored as its digest.

        Raises:
            ResourceConflictError: If the email is already registered.
        """
        data = user.model_dump()
        data["password"] = hash_password(data["password"])
        db_user = User(**data)
        try:
            with transaction(self.db):
                self.db.add(db_user)
        except IntegrityError:
            raise ResourceConflictError(f"User with email {user.email} already exists")
        self.db.refresh(db_user)
        return db_user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def update_user(self, user_id: int, user_update: UserUpdate) -> Optional[User]:
        """Update user columns and upsert theme/default_view together."""
        user = self.get_by_id(user_id)
        if not user:
            return None

        update_data = user_update.model_dump(exclude_unset=True)
        settings_update = SettingsUpdate(
            theme=update_data.pop("theme", None),
            default_view=update_data.pop("default_view", None),
        )
        if "password" in update_data:
            update_data["password"] = hash_password(update_data["password"])

        try:
            with transaction(self.db):
                for field, value in update_data.items():
                    setattr(user, field, value)
                if settings_update.theme is not None or settings_update.default_view is not None:
                    SettingsService(self.db).apply(user_id, settings_update)
        except IntegrityError:
            raise ResourceConflictError(f"User with email {user_update.email} already exists")
        self.db.refresh(user)
        return user

    def list_users(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def list_managers(self) -> List[User]:
        return self.db.query(User).filter(User.role_id == MANAGER_ROLE_ID).order_by(User.id).all()

    def roles_map(self) -> Dict[int, str]:
        return dict(self.db.execute(select(Role.id, Role.role_name)).all())

    def groups_map(self) -> Dict[int, str]:
        return dict(self.db.execute(select(Group.id, Group.group_name)).all())

    def group_names(self) -> List[str]:
        return list(self.db.execute(select(Group.group_name).distinct().order_by(Group.group_name)).scalars())

    def user_ids_by_group_name(self, group_name: str) -> List[int]:
        return list(self.db.execute(
            select(User.id)
            .join(Group, User.group_id == Group.id)
            .where(Group.group_name == group_name)
            .order_by(User.id)
        ).scalars())

    def delete_user(self, user_id: int) -> MutationOutcome:
        """Delete a user and the settings row that belongs to it."""
        db = self.db
        try:
            with transaction(db):
                bulk_execute(db, delete(Settings).where(Settings.user_id == user_id))
                removed = bulk_execute(db, delete(User).where(User.id == user_id))
        except SQLAlchemyError as exc:
            return report_failure(logger, f"delete_user({user_id})", exc)

        if not removed:
            return MutationOutcome.NOT_FOUND
        logger.info("Deleted user %s", user_id)
        return MutationOutcome.SUCCESS
