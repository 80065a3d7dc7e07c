import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskdesk import models  # noqa: F401  registers every table on Base
from taskdesk.database import Base, get_db
from taskdesk.main import app
from taskdesk.schemas.project import ProjectCreate, TeamCreate
from taskdesk.schemas.task import TaskCreate
from taskdesk.schemas.user import UserCreate
from taskdesk.services.projects import ProjectService
from taskdesk.services.roles import RoleService
from taskdesk.services.tasks import TaskService
from taskdesk.services.teams import TeamService
from taskdesk.services.users import UserService


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    RoleService(session).seed_defaults()
    yield session
    session.close()


@pytest.fixture
def client(db, session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sql_log(engine):
    """Every SQL statement sent to the database while the test runs."""
    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", capture)
    yield statements
    event.remove(engine, "before_cursor_execute", capture)


@pytest.fixture
def fail_on(engine):
    """Make statements starting with a given prefix raise a database error."""
    installed = []

    def install(prefix, error=OperationalError):
        def inject(conn, cursor, statement, parameters, context, executemany):
            if statement.lstrip().upper().startswith(prefix.upper()):
                raise error(statement, parameters, Exception("injected fault"))

        event.listen(engine, "before_cursor_execute", inject)
        installed.append(inject)

    yield install
    for inject in installed:
        event.remove(engine, "before_cursor_execute", inject)


_emails = itertools.count(1)


@pytest.fixture
def make_user(db):
    def factory(role_id=4, **overrides):
        data = {
            "name": "Jan",
            "last_name": "Kowalski",
            "email": f"user{next(_emails)}@example.com",
            "password": "secret!1",
            "role_id": role_id,
            "group_id": 1,
        }
        data.update(overrides)
        return UserService(db).create_user(UserCreate(**data))
    return factory


@pytest.fixture
def make_project(db):
    def factory(name="Migration", manager_id=None):
        return ProjectService(db).create_project(
            ProjectCreate(project_name=name, description="", manager_id=manager_id)
        )
    return factory


@pytest.fixture
def make_team(db):
    def factory(project_id, name="Backend"):
        return TeamService(db).create_team(TeamCreate(team_name=name, project_id=project_id))
    return factory


@pytest.fixture
def make_task(db):
    def factory(project_id, team_id=None, title="Write docs", actor_id=None):
        return TaskService(db).create_task(
            TaskCreate(project_id=project_id, team_id=team_id, title=title),
            actor_id=actor_id,
        )
    return factory
