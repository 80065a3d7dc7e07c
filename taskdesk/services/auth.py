"""Registration, login and password changes."""

import re
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from taskdesk.core.config import settings
from taskdesk.core.exceptions import ResourceConflictError, ResourceNotFoundError, ValidationError
from taskdesk.core.security import hash_password, verify_password
from taskdesk.database import transaction
from taskdesk.models.user import User
from taskdesk.schemas.user import UserSignup
from taskdesk.services.activity import ActivityService
from taskdesk.services.settings import SettingsService
from taskdesk.services.users import UserService

EMAIL_PATTERN = re.compile(r"^.{2,}@.{2,}$")
SPECIAL_CHAR_PATTERN = re.compile(r"[^A-Za-z0-9]")


@dataclass(frozen=True)
class RegistrationResult:
    success: bool
    message: str

    @classmethod
    def ok(cls, message: str) -> "RegistrationResult":
        return cls(True, message)

    @classmethod
    def fail(cls, message: str) -> "RegistrationResult":
        return cls(False, message)


def _is_capitalized(text: Optional[str]) -> bool:
    return bool(text) and text[0].isupper()


class AuthService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserService(db)

    def authenticate(self, email: str, raw_password: str) -> Optional[User]:
        """Return the user whose stored digest matches, else None."""
        if not email or raw_password is None:
            return None
        user = self.users.get_by_email(email)
        if user and verify_password(raw_password, user.password):
            return user
        return None

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> RegistrationResult:
        if not _is_capitalized(first_name):
            return RegistrationResult.fail("First name must start with an uppercase letter")
        if not _is_capitalized(last_name):
            return RegistrationResult.fail("Last name must start with an uppercase letter")
        if not email or not EMAIL_PATTERN.match(email):
            return RegistrationResult.fail("Email must contain '@' with at least two characters on each side")
        if not password or not SPECIAL_CHAR_PATTERN.search(password):
            return RegistrationResult.fail("Password must contain at least one special character")
        if password != confirm_password:
            return RegistrationResult.fail("Passwords do not match")

        new_user = UserSignup(
            name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            role_id=settings.DEFAULT_ROLE_ID,
            group_id=settings.DEFAULT_GROUP_ID,
            password_hint="",
        )
        try:
            self.users.create_user(new_user)
        except ResourceConflictError:
            return RegistrationResult.fail("Registration failed, the email may already be taken")
        return RegistrationResult.ok("Registration successful")

    @staticmethod
    def validate_and_hash_password(new_password: str, confirm_password: str) -> str:
        """
        Raises:
            ValidationError: If a field is blank or the two do not match.
        """
        if not new_password or not confirm_password or not new_password.strip() or not confirm_password.strip():
            raise ValidationError("Password fields must not be empty")
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")
        return hash_password(new_password)

    def change_password(
        self,
        user_id: int,
        new_password: str,
        confirm_password: str,
        actor_id: Optional[int] = None,
    ) -> User:
        """Store a new password digest and stamp the settings row.

        A PASSWORD activity is recorded; it counts as an admin reset when
        actor_id differs from user_id.
        """
        hashed = self.validate_and_hash_password(new_password, confirm_password)
        user = self.users.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")

        with transaction(self.db):
            user.password = hashed
            SettingsService(self.db).touch_password_change(user_id, commit=False)
            ActivityService(self.db).log_password_change(
                user_id,
                changed_by_admin=actor_id is not None and actor_id != user_id,
                actor_id=actor_id,
                commit=False,
            )
        self.db.refresh(user)
        return user
