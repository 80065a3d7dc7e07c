from typing import List, Optional

from sqlalchemy.orm import Session

from taskdesk.database import transaction
from taskdesk.models.user import Role, Group

# Reference data written on startup
DEFAULT_ROLES = {
    1: "Administrator",
    2: "Manager",
    3: "Team Leader",
    4: "Employee",
}
DEFAULT_GROUPS = {1: "General"}

MANAGER_ROLE_ID = 2


class RoleService:
    def __init__(self, db: Session):
        self.db = db

    def list_roles(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.id).all()

    def get_by_name(self, role_name: str) -> Optional[Role]:
        return self.db.query(Role).filter(Role.role_name == role_name).first()

    def create_role(self, role_name: str, permissions: Optional[str] = None) -> Role:
        role = Role(role_name=role_name, permissions=permissions)
        with transaction(self.db):
            self.db.add(role)
        self.db.refresh(role)
        return role

    def seed_defaults(self) -> None:
        """Insert the reference roles and groups that are missing."""
        with transaction(self.db):
            for role_id, name in DEFAULT_ROLES.items():
                if self.db.get(Role, role_id) is None:
                    self.db.add(Role(id=role_id, role_name=name))
            for group_id, name in DEFAULT_GROUPS.items():
                if self.db.get(Group, group_id) is None:
                    self.db.add(Group(id=group_id, group_name=name))
