# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from niche_communities.core.security import create_access_token, hash_password
from niche_communities.db.session import Base
from niche_communities.db.session import get_db as app_get_session
from niche_communities.db.session import get_session_factory as app_get_session_factory
from niche_communities.main import app as fastapi_app
from niche_communities.models import Community, Post, User
from niche_communities.services.interactions import InteractionCoordinator
from niche_communities.services.membership import MembershipCoordinator
from niche_communities.services.notifications import NotificationHub, get_notification_hub

TEST_DB_URL = "sqlite://"
TEST_PASSWORD = "hunter22"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture()
def db_session(engine: Engine, session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Coordinators commit, so every test starts from empty tables.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def hub() -> NotificationHub:
    """Return a notification hub private to one test."""
    return NotificationHub()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    session_factory: sessionmaker[Session],
    hub: NotificationHub,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[app_get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_notification_hub] = lambda: hub
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(app_get_session_factory, None)
        app.dependency_overrides.pop(get_notification_hub, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _create_user(db_session: Session, email: str, display_name: str) -> User:
    user = User(
        email=email,
        password_hash=hash_password(TEST_PASSWORD),
        display_name=display_name,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def owner(db_session: Session) -> User:
    """User A: creates the default community and writes the default post."""
    return _create_user(db_session, "alice@example.com", "Alice")


@pytest.fixture()
def member(db_session: Session) -> User:
    """User B: joins communities and interacts with posts."""
    return _create_user(db_session, "bob@example.com", "Bob")


@pytest.fixture()
def outsider(db_session: Session) -> User:
    """User C: never the creator of anything."""
    return _create_user(db_session, "carol@example.com", "Carol")


@pytest.fixture()
def owner_headers(owner: User) -> dict[str, str]:
    return _headers(owner)


@pytest.fixture()
def member_headers(member: User) -> dict[str, str]:
    return _headers(member)


@pytest.fixture()
def outsider_headers(outsider: User) -> dict[str, str]:
    return _headers(outsider)


@pytest.fixture()
def membership(db_session: Session, hub: NotificationHub) -> MembershipCoordinator:
    return MembershipCoordinator(db_session, hub)


@pytest.fixture()
def interactions(db_session: Session, hub: NotificationHub) -> InteractionCoordinator:
    return InteractionCoordinator(db_session, hub)


@pytest.fixture()
def community(membership: MembershipCoordinator, owner: User) -> Community:
    """Create "Chess Club", owned by ``owner``."""
    return membership.create_community(
        owner,
        name="Chess Club",
        description="Openings, endgames and everything between",
        category="Games",
    )


@pytest.fixture()
def post(interactions: InteractionCoordinator, community: Community, owner: User) -> Post:
    """Create a post by the community owner."""
    return interactions.create_post(owner, community.id, content="Weekly puzzle thread")


@pytest.fixture()
def failing_commit(db_session: Session, monkeypatch: pytest.MonkeyPatch):
    """Make selected calls to ``db_session.commit`` fail.

    Call the fixture with the 1-based numbers of the commits that should
    raise; every other commit goes through.
    """
    from sqlalchemy.exc import OperationalError

    real_commit = db_session.commit

    def _install(*failing_calls: int) -> None:
        calls = {"count": 0}

        def _commit() -> None:
            calls["count"] += 1
            if calls["count"] in failing_calls:
                raise OperationalError("COMMIT", {}, Exception("database is unavailable"))
            real_commit()

        monkeypatch.setattr(db_session, "commit", _commit)

    return _install


@pytest.fixture()
def user_password() -> str:
    """Password of every user created by the fixtures above."""
    return TEST_PASSWORD
