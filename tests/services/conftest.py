"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness check sees the test engine
    - Seeded members: admin (administrator), jdoe and other (subscribers)

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Passwords hashed with a low iteration count; verification cost is not
      what these tests exercise
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from community_rest.config import Settings, get_settings
from community_rest.db.base import Base
from community_rest.infrastructure.database import get_db, DatabaseSessionManager
from community_rest.infrastructure.passwords import hash_password
from community_rest.models.member import Member
from community_rest.models.notification import Notification
import community_rest.infrastructure.database as db_module
from community_rest.main import app

from tests.services.fakes import PASSWORD


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def multisite():
    """Switch the app to multisite mode with `admin` as the only site admin."""
    app.dependency_overrides[get_settings] = lambda: Settings(
        multisite=True, site_admins=["admin"],
    )
    yield
    app.dependency_overrides.pop(get_settings, None)


def _member(login: str, roles: list[str], **extra) -> Member:
    return Member(
        user_login=login,
        user_nicename=login,
        display_name=extra.pop("display_name", login.title()),
        user_email=f"{login}@example.com",
        password_hash=hash_password(PASSWORD, iterations=1000),
        roles=roles,
        extra_caps={},
        member_types=extra.pop("member_types", []),
        xprofile=extra.pop("xprofile", {}),
        user_registered=datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc),
        **extra,
    )


@pytest.fixture
async def members(test_db):
    """Insert admin, jdoe and other; returns them keyed by login."""
    rows = [
        _member("admin", ["administrator"]),
        _member(
            "jdoe", ["subscriber"], display_name="Jane Doe",
            member_types=["student"], xprofile={"Base": {"Name": "Jane Doe"}},
        ),
        _member("other", ["subscriber"]),
    ]
    test_db.add_all(rows)
    await test_db.commit()
    for row in rows:
        await test_db.refresh(row)
    return {row.user_login: row for row in rows}


@pytest.fixture
async def notifications(test_db, members):
    """Two notifications for jdoe (one read), one for other."""
    jdoe, other = members["jdoe"], members["other"]
    rows = [
        Notification(
            user_id=jdoe.id, item_id=1, secondary_item_id=0,
            component_name="messages", component_action="new_message",
            date_notified=datetime(2024, 2, 1, 10, 0, tzinfo=timezone.utc),
            is_new=True, content="New message", href="http://example.test/m/1",
        ),
        Notification(
            user_id=jdoe.id, item_id=2, secondary_item_id=0,
            component_name="friends", component_action="friendship_request",
            date_notified=datetime(2024, 2, 2, 10, 0, tzinfo=timezone.utc),
            is_new=False, content="Friend request", href="http://example.test/f/2",
        ),
        Notification(
            user_id=other.id, item_id=3, secondary_item_id=0,
            component_name="messages", component_action="new_message",
            date_notified=datetime(2024, 2, 3, 10, 0, tzinfo=timezone.utc),
            is_new=True, content="Hello", href="http://example.test/m/3",
        ),
    ]
    test_db.add_all(rows)
    await test_db.commit()
    for row in rows:
        await test_db.refresh(row)
    return rows
