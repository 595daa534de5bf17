"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created fresh for each test
- Course/role/enrollment factories
- JWT token minting for authenticated tests
- HTTPX AsyncClient with proper headers
"""
import os
import uuid
from dataclasses import dataclass
from typing import AsyncGenerator, Callable, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from coursemail.main import app
from coursemail.core.deps import COOKIE_NAME, get_db
from coursemail.core.security import create_session_token
from coursemail.db.base import Base
from coursemail.db.models import Course, Enrollment, Role, User
from coursemail.db.session import SessionLocal


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db_engine() -> Generator[Engine, None, None]:
    """A private in-memory database shared by every connection of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine: Engine) -> Generator[Session, None, None]:
    session = SessionLocal(bind=db_engine)
    yield session
    session.close()


# =============================================================================
# Course Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def roles(db: Session) -> dict[str, Role]:
    """Standard course roles keyed by shortname."""
    created = {}
    for shortname, name in [
        ("manager", "Manager"),
        ("editingteacher", "Teacher"),
        ("teacher", "Non-editing teacher"),
        ("student", "Student"),
    ]:
        role = Role(shortname=shortname, name=name)
        db.add(role)
        created[shortname] = role
    db.flush()
    return created


@pytest.fixture(scope="function")
def test_course(db: Session) -> Course:
    course = Course(
        short_name=f"C-{uuid.uuid4().hex[:6]}",
        full_name="Introduction to Testing",
    )
    db.add(course)
    db.flush()
    return course


@pytest.fixture(scope="function")
def make_user(db: Session) -> Callable[..., User]:
    """Factory: create an active user, optionally enrolled in a course."""
    def _make(
        display_name: str = "Test User",
        course: Course | None = None,
        role: Role | None = None,
        **kwargs,
    ) -> User:
        user = User(
            email=f"user-{uuid.uuid4().hex[:8]}@example.com",
            display_name=display_name,
            **kwargs,
        )
        db.add(user)
        db.flush()
        if course is not None and role is not None:
            db.add(Enrollment(course_id=course.id, user_id=user.id, role_id=role.id))
            db.flush()
        return user

    return _make


@pytest.fixture(scope="function")
def test_user(make_user, test_course: Course, roles: dict[str, Role]) -> User:
    """An editing teacher in test_course (cansend, allowalternate, canconfig)."""
    user = make_user("Terry Teacher", course=test_course, role=roles["editingteacher"])
    return user


# =============================================================================
# Auth Fixtures
# =============================================================================

@dataclass
class TestAuth:
    """Test authentication context."""
    user: User
    token: str
    cookie_name: str = COOKIE_NAME


@pytest.fixture(scope="function")
def test_auth(db: Session, test_user: User) -> TestAuth:
    """Create JWT token for test user."""
    db.commit()
    token = create_session_token(
        user_id=test_user.id,
        token_version=test_user.token_version,
    )
    return TestAuth(user=test_user, token=token)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient for testing public endpoints.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def authed_client(
    db: Session,
    test_auth: TestAuth
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create authenticated AsyncClient with JWT cookie and CSRF header.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        cookies={test_auth.cookie_name: test_auth.token},
        headers={"X-Requested-With": "XMLHttpRequest"},  # CSRF header
    ) as c:
        yield c

    app.dependency_overrides.clear()
