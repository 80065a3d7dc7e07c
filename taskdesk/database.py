"""Database engine, session factory and scoped transactions."""

from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from taskdesk.core.config import settings


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
    echo=settings.SQL_ECHO,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves FK enforcement off per connection unless asked.
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency that provides a DB session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for callers outside a request (seeding, scripts)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def bulk_execute(db: Session, statement) -> int:
    """Execute a bulk UPDATE/DELETE and return the affected row count."""
    result = db.execute(statement.execution_options(synchronize_session=False))
    return result.rowcount


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Run a unit of work: commit when the block exits, roll back on error.

    The exception is re-raised after the rollback so the operation boundary
    decides how to report it.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
