from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional
from datetime import datetime


# Shared properties
class UserBase(BaseModel):
    name: str
    last_name: str
    email: EmailStr
    role_id: int
    group_id: Optional[int] = None
    password_hint: str = ""


# Admin insert: raw password, hashed by the service
class UserCreate(UserBase):
    password: str


# Self-registration insert; the email only has to match the registration pattern
class UserSignup(BaseModel):
    name: str
    last_name: str
    email: str
    password: str
    role_id: int
    group_id: Optional[int] = None
    password_hint: str = ""


class UserUpdate(BaseModel):
    name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    password_hint: Optional[str] = None
    role_id: Optional[int] = None
    group_id: Optional[int] = None
    theme: Optional[str] = None
    default_view: Optional[str] = None


# Properties to return to client
class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    last_name: str
    email: str
    role_id: int
    group_id: Optional[int] = None
    password_hint: Optional[str] = None
    theme: Optional[str] = None
    default_view: Optional[str] = None


class TeamMemberUser(BaseModel):
    """User as listed inside a team"""
    id: int
    name: str
    last_name: str
    email: str
    role_id: int
    is_leader: bool = False


# Self-registration form
class UserRegister(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str
    confirm_password: str


class RegistrationResponse(BaseModel):
    success: bool
    message: str


class UserLogin(BaseModel):
    email: str
    password: str


class PasswordChange(BaseModel):
    new_password: str
    confirm_password: str


class UserTeamChange(BaseModel):
    team_id: int


class SettingsUpdate(BaseModel):
    theme: Optional[str] = None
    default_view: Optional[str] = None


class Settings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    theme: Optional[str] = None
    default_view: Optional[str] = None
    last_password_change: Optional[datetime] = None
