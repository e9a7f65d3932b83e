"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine for a local
SQLite database and provides small helpers used by the application and
tests. The database file defaults to `backend/app.db` and can be moved
with `TESTTRACK_DB_PATH`.
"""

from sqlmodel import SQLModel, create_engine, Session
from .config import settings

DB_URL = f"sqlite:///{settings.DB_PATH}"
engine = create_engine(DB_URL, echo=False, connect_args={"check_same_thread": False})


def create_db_and_tables():
    """Create database tables using SQLModel metadata.

    Tables are created if missing; existing data is left alone. There
    is no migration step, the schema only ever grows by new tables.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
