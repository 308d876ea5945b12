"""
pytest Fixtures for GroupFinder API Tests

Shared fixtures:
- engine / db_session: SQLite in-memory database, one outer transaction
  per test that is rolled back afterwards
- client: TestClient with get_db overridden to use db_session
- user, second_user, admin_user, category, group, badges: sample data

Services commit and sometimes roll back (or use SAVEPOINTs for best-effort
writes). The session therefore joins the outer transaction with
join_transaction_mode="create_savepoint": its commits and rollbacks only
touch a nested SAVEPOINT, and the outer transaction still discards
everything at the end of the test.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# Set environment variables BEFORE importing the app
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from groupfinder.database import Base, get_db
from groupfinder.main import app
from groupfinder.models import Badge, Category, Group, User, UserRole
from groupfinder.services.security import hash_password


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="session")
def engine():
    """
    SQLite in-memory engine shared by the whole test session.

    StaticPool keeps the single connection alive; without it the in-memory
    database would disappear between connections.

    pysqlite does its own transaction handling, which breaks SAVEPOINT;
    the two listeners hand BEGIN back to SQLAlchemy.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """Fresh session per test, rolled back when the test ends."""
    connection = engine.connect()
    transaction = connection.begin()

    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    session = TestSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client using the test session instead of the real database."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Session cleanup handled by db_session fixture

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# HELPERS
# =============================================================================


def _make_user(db_session: Session, email: str, username: str, role: str = UserRole.USER.value) -> User:
    user = User(
        email=email,
        username=username,
        display_name=username.title(),
        hashed_password=hash_password("SecurePass123"),
        is_active=True,
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def user(db_session: Session) -> User:
    return _make_user(db_session, "alice@example.com", "alice")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """A second user for ownership scenarios."""
    return _make_user(db_session, "bob@example.com", "bob")


@pytest.fixture
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, "admin@example.com", "moderator", role=UserRole.ADMIN.value)


@pytest.fixture
def second_admin(db_session: Session) -> User:
    return _make_user(db_session, "admin2@example.com", "moderator2", role=UserRole.ADMIN.value)


@pytest.fixture
def category(db_session: Session) -> Category:
    category = Category(name="Photography", slug="photography", description="Cameras and pictures")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def group(db_session: Session, category: Category, user: User) -> Group:
    """A pending group submitted by `user`."""
    group = Group(
        name="Street Photography Worldwide",
        url="https://www.facebook.com/groups/streetphoto",
        description="Share your candid street shots.",
        category_id=category.id,
        submitted_by=user.id,
    )
    db_session.add(group)
    db_session.commit()
    db_session.refresh(group)
    return group


@pytest.fixture
def second_group(db_session: Session, category: Category, second_user: User) -> Group:
    group = Group(
        name="Film Shooters",
        url="https://www.facebook.com/groups/filmshooters",
        description="Analog photography enthusiasts.",
        category_id=category.id,
        submitted_by=second_user.id,
    )
    db_session.add(group)
    db_session.commit()
    db_session.refresh(group)
    return group


@pytest.fixture
def reputation_badges(db_session: Session) -> list[Badge]:
    """Reputation badges unlocked at 100 and 500 points."""
    badges = [
        Badge(
            name="Rising Star",
            description="Reached 100 reputation",
            icon="star",
            points=0,
            category="reputation",
            requirements={"action": "reputation", "minimum": 100},
            display_order=1,
        ),
        Badge(
            name="Pillar",
            description="Reached 500 reputation",
            icon="pillar",
            points=0,
            category="reputation",
            requirements={"action": "reputation", "minimum": 500},
            display_order=2,
        ),
    ]
    db_session.add_all(badges)
    db_session.commit()
    for badge in badges:
        db_session.refresh(badge)
    return badges


@pytest.fixture
def badge(db_session: Session) -> Badge:
    """A manually awarded badge worth 25 points."""
    badge = Badge(
        name="Helpful",
        description="Went out of their way to help",
        icon="hand",
        points=25,
        category="special",
        display_order=10,
    )
    db_session.add(badge)
    db_session.commit()
    db_session.refresh(badge)
    return badge
