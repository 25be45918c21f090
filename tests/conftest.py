# tests/conftest.py
import pytest
from datetime import date, time
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import build_engine, get_db
from app.core.security import create_access_token
from app.dependencies import get_today
from app.models.base import Base
from app.models.facility import Room, Schedule, RoomType, RoomStatus
from app.models.user import UserRole
from app.schemas.token import Caller
import app.models  # noqa: F401

TODAY = date(2026, 3, 1)

@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection of the test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def today():
    return TODAY

# --- Callers ---

@pytest.fixture
def admin():
    return Caller(id=1, role=UserRole.ADMINISTRATOR)

@pytest.fixture
def lecturer():
    return Caller(id=2, role=UserRole.LECTURER)

@pytest.fixture
def student():
    return Caller(id=3, role=UserRole.STUDENT)

@pytest.fixture
def anonymous():
    return Caller.anonymous()

# --- Seed data ---

@pytest.fixture
def room(db):
    room = Room(name="R1", room_type=RoomType.CLASS, status=RoomStatus.OPEN, tag_ids=[1])
    db.add(room)
    db.commit()
    db.refresh(room)
    return room

@pytest.fixture
def schedule(db, room):
    schedule = Schedule(room_id=room.id, start_time=time(8, 0), end_time=time(10, 0))
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule

# --- HTTP ---

@pytest.fixture
def client(session_factory):
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

def _auth_header(user_id: int, role: UserRole):
    return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}

@pytest.fixture
def admin_headers():
    return _auth_header(1, UserRole.ADMINISTRATOR)

@pytest.fixture
def lecturer_headers():
    return _auth_header(2, UserRole.LECTURER)

@pytest.fixture
def student_headers():
    return _auth_header(3, UserRole.STUDENT)
