from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./taskdesk.db"
    SQL_ECHO: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Project info
    PROJECT_NAME: str = "TaskDesk API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "Project, team and task management backend"

    # Registration defaults (role 3 = Team Leader, group 1 = General)
    DEFAULT_ROLE_ID: int = 3
    DEFAULT_GROUP_ID: int = 1

    class Config:
        env_file = ".env"


settings = Settings()
