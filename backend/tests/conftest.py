"""
Shared test configuration.

API tests override get_db with a MagicMock and patch the services, so no real
database is reached. Property tests (aggregation, migrations, services) use an
in-memory SQLite database through the `db` fixture.
"""

import os

# schoolraise.database builds its engine at import time.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import schoolraise.models  # noqa: E402,F401
from schoolraise.database import Base, get_db  # noqa: E402
from schoolraise.dependencies import get_current_school, get_current_student, get_optional_user  # noqa: E402
from schoolraise.main import app  # noqa: E402
from schoolraise.models.fundraiser import Fundraiser, StudentFundraiser  # noqa: E402
from schoolraise.models.school import School  # noqa: E402
from schoolraise.models.student import Student  # noqa: E402
from schoolraise.models.user import User  # noqa: E402
from schoolraise.presentation import queries  # noqa: E402
from schoolraise.presentation.query_cache import QueryCacheRegistry  # noqa: E402


# --- Mock factories ---

def make_user_mock(user_id=1, role="admin", **kwargs):
    user = MagicMock(spec=User)
    user.id = user_id
    user.role = role
    user.email = kwargs.get("email", f"{role}{user_id}@example.com")
    user.username = kwargs.get("username", f"{role}{user_id}")
    user.password = kwargs.get("password", "hashed")
    user.created_at = kwargs.get("created_at", datetime(2026, 1, 5, 9, 0))
    return user


def make_school_mock(school_id=1, user_id=2, **kwargs):
    school = MagicMock(spec=School)
    school.id = school_id
    school.user_id = user_id
    school.name = kwargs.get("name", "Greenfield High")
    school.admin_name = kwargs.get("admin_name", "Mrs Dlamini")
    school.address = kwargs.get("address", "12 Main Road")
    school.created_at = kwargs.get("created_at", datetime(2026, 1, 5, 9, 0))
    return school


def make_student_mock(student_id=1, school_id=1, user_id=3):
    student = MagicMock(spec=Student)
    student.id = student_id
    student.school_id = school_id
    student.user_id = user_id
    student.created_at = datetime(2026, 1, 6, 9, 0)
    return student


def make_fundraiser_mock(fundraiser_id=1, school_id=1, **kwargs):
    fundraiser = MagicMock(spec=Fundraiser)
    fundraiser.id = fundraiser_id
    fundraiser.school_id = school_id
    fundraiser.name = kwargs.get("name", "Spring Fair")
    fundraiser.location = kwargs.get("location", "School Hall")
    fundraiser.is_active = kwargs.get("is_active", True)
    fundraiser.event_date = kwargs.get("event_date", datetime.now() + timedelta(days=10))
    fundraiser.price = kwargs.get("price", 1000)
    fundraiser.created_at = kwargs.get("created_at", datetime(2026, 1, 7, 9, 0))
    return fundraiser


# --- HTTP client with mocked database ---

@pytest.fixture(autouse=True)
def fresh_query_cache(monkeypatch):
    """Each test gets its own page cache."""
    registry = QueryCacheRegistry(ttl_seconds=30)
    monkeypatch.setattr(queries, "query_caches", registry)
    return registry


@pytest.fixture
def mock_db():
    return MagicMock()


@pytest.fixture
def client(mock_db):
    """Test HTTP client with the database mocked."""
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def login_as(user):
    app.dependency_overrides[get_optional_user] = lambda: user
    return user


@pytest.fixture
def admin_user():
    return login_as(make_user_mock(user_id=1, role="admin"))


@pytest.fixture
def school_user():
    user = login_as(make_user_mock(user_id=2, role="school"))
    school = make_school_mock(school_id=1, user_id=user.id)
    app.dependency_overrides[get_current_school] = lambda: school
    return user, school


@pytest.fixture
def student_user():
    user = login_as(make_user_mock(user_id=3, role="student"))
    student = make_student_mock(student_id=1, school_id=1, user_id=user.id)
    app.dependency_overrides[get_current_student] = lambda: student
    return user, student


# --- In-memory SQLite database ---

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


# --- Row builders for the SQLite fixtures ---

def add_user(db, username, role):
    user = User(email=f"{username}@example.com", username=username, password="x", role=role)
    db.add(user)
    db.flush()
    return user


def add_school(db, name="Greenfield High"):
    user = add_user(db, name.lower().replace(" ", "_"), "school")
    school = School(name=name, admin_name="Admin", user_id=user.id)
    db.add(school)
    db.flush()
    return school


def add_student(db, school, username):
    user = add_user(db, username, "student")
    student = Student(school_id=school.id, user_id=user.id)
    db.add(student)
    db.flush()
    return student


def add_fundraiser(db, school, name="Spring Fair", price=1000, days=10, is_active=True):
    fundraiser = Fundraiser(
        name=name,
        location="School Hall",
        school_id=school.id,
        is_active=is_active,
        event_date=datetime.now() + timedelta(days=days),
        price=price,
    )
    db.add(fundraiser)
    db.flush()
    return fundraiser


def add_ticket(db, student, fundraiser):
    ticket = StudentFundraiser(student_id=student.id, fundraiser_id=fundraiser.id)
    db.add(ticket)
    db.flush()
    return ticket
