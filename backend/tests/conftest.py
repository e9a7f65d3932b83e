from pathlib import Path
import os
import tempfile
import pytest

# Point the app at a throwaway database before `testtrack` is first imported.
_TMP_DIR = tempfile.mkdtemp(prefix="testtrack-")
os.environ["TESTTRACK_DB_PATH"] = str(Path(_TMP_DIR) / "test.db")


@pytest.fixture(autouse=True)
def empty_db():
    """Start and finish every test with no stored entries."""
    from sqlmodel import Session
    from testtrack.database import engine, create_db_and_tables
    from testtrack.repositories import SittingRepository

    create_db_and_tables()
    with Session(engine) as session:
        SittingRepository(session).delete_all()
    yield
    with Session(engine) as session:
        SittingRepository(session).delete_all()
