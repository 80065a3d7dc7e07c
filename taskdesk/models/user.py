from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from taskdesk.database import Base


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    role_name = Column(String(50), unique=True, nullable=False)
    permissions = Column(Text, nullable=True)


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, index=True)
    group_name = Column(String(100), unique=True, nullable=False)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(64), nullable=False)  # sha-256 hex digest
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=True)
    password_hint = Column(String(255), default="")

    # Relationships
    role = relationship("Role")
    group = relationship("Group")
    settings = relationship("Settings", uselist=False, back_populates="user")

    @property
    def theme(self):
        return self.settings.theme if self.settings else None

    @property
    def default_view(self):
        return self.settings.default_view if self.settings else None


class Settings(Base):
    """Per-user preferences, created lazily on first write."""
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    theme = Column(String(50), nullable=True)
    default_view = Column(String(50), nullable=True)
    last_password_change = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="settings")
