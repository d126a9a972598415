import itertools
import os
import tempfile
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# Ensure tests always use SQLite and a cheap bcrypt work factor
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_jobportal.db")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from jobportal import crud
from jobportal.database import Base, enable_sqlite_foreign_keys, get_db, get_session_factory
from jobportal.main import app
from jobportal.token import create_access_token


@pytest.fixture(scope="session")
def test_db_url():
    # Use a temporary SQLite file to persist across tests within a session
    db_fd, db_path = tempfile.mkstemp(prefix="test_jobportal_", suffix=".db")
    os.close(db_fd)
    url = f"sqlite:///{db_path}"
    yield url
    try:
        os.remove(db_path)
    except FileNotFoundError:
        pass


@pytest.fixture()
def session_factory(test_db_url):
    engine = enable_sqlite_foreign_keys(
        create_engine(test_db_url, connect_args={"check_same_thread": False})
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)
    # Ensure file handles are released on Windows
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db_session, session_factory):
    # Override the dependencies to use the test database
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    # background tasks (job-posted fan-out) open their own sessions
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    token = create_access_token(str(user.id), user.role, user.name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(db_session):
    """Create a user directly in the store; returns (user, auth headers)."""
    counter = itertools.count(1)

    def _make(role="worker", password="secret123", **profile):
        n = next(counter)
        user = crud.create_user(
            db_session, f"{role.title()} {n}", f"{role}{n}@example.com", password, role, **profile
        )
        return user, auth_headers(user)

    return _make


@pytest.fixture()
def make_job(db_session):
    """Create a job without publishing JobPosted (no fan-out)."""

    def _make(employer, **overrides):
        fields = {
            "title": "Plumber",
            "description": "Fix leaking pipes in residential buildings",
            "category": "Plumbing",
            "city": "Pune",
            "pincode": "411001",
            "salary": 30000,
        }
        fields.update(overrides)
        return crud.create_job(db_session, employer.id, **fields)

    return _make
