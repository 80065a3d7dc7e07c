from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from taskdesk.database import bulk_execute, transaction
from taskdesk.models.user import Settings
from taskdesk.schemas.user import SettingsUpdate


class SettingsService:
    """One settings row per user, created on first write."""

    def __init__(self, db: Session):
        self.db = db

    def get_for_user(self, user_id: int) -> Optional[Settings]:
        return self.db.query(Settings).filter(Settings.user_id == user_id).first()

    def _get_or_add(self, user_id: int) -> Settings:
        settings = self.get_for_user(user_id)
        if settings is None:
            settings = Settings(user_id=user_id)
            self.db.add(settings)
        return settings

    def create_settings(self, user_id: int, theme: Optional[str] = None, default_view: Optional[str] = None) -> Settings:
        settings = Settings(user_id=user_id, theme=theme, default_view=default_view)
        with transaction(self.db):
            self.db.add(settings)
        self.db.refresh(settings)
        return settings

    def apply(self, user_id: int, update: SettingsUpdate) -> Settings:
        """Upsert theme/default_view without committing."""
        settings = self._get_or_add(user_id)
        for field, value in update.model_dump(exclude_none=True).items():
            setattr(settings, field, value)
        return settings

    def update_settings(self, user_id: int, update: SettingsUpdate) -> Settings:
        with transaction(self.db):
            settings = self.apply(user_id, update)
        self.db.refresh(settings)
        return settings

    def update_default_view(self, user_id: int, default_view: str) -> Settings:
        return self.update_settings(user_id, SettingsUpdate(default_view=default_view))

    def touch_password_change(self, user_id: int, commit: bool = True) -> Settings:
        settings = self._get_or_add(user_id)
        settings.last_password_change = datetime.now(timezone.utc)
        if commit:
            self.db.commit()
            self.db.refresh(settings)
        return settings

    def delete_for_user(self, user_id: int) -> bool:
        with transaction(self.db):
            removed = bulk_execute(self.db, delete(Settings).where(Settings.user_id == user_id))
        return removed > 0
