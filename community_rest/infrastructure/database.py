"""Database Sessions — one AsyncSession per request for the member and notification stores.

Invariants:
    - A session that raises is rolled back before the error leaves get_db()
    - SQLAlchemy failures surface as DatabaseError (503, rest_database_error);
      domain errors (not found, forbidden, ...) pass through unchanged
    - readiness_checks() reports the connection and each resource table

Design Decisions:
    - Module-level db_manager set by the FastAPI lifespan; tests swap it
    - expire_on_commit=False: stores hand committed rows to the projector
      without a reload
    - SQLite URLs (tests, local runs) skip pool sizing
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select, text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from community_rest.core.errors import DatabaseError
from community_rest.models.member import Member
from community_rest.models.notification import Notification

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors.
_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Constraint violated (duplicate login or e-mail?)", "commit"),
    (OperationalError, "Database unreachable or locked", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)

READINESS_TABLES = {"members": Member, "notifications": Notification}


def _engine_options(database_url: str, pool_size: int, max_overflow: int) -> dict:
    if database_url.startswith("sqlite"):
        return {}
    return {
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


def _as_database_error(exc: SQLAlchemyError) -> DatabaseError:
    for kind, message, operation in _FAILURES:
        if isinstance(exc, kind):
            return DatabaseError(message, operation)
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Engine plus session factory for the stores."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url, **_engine_options(database_url, pool_size, max_overflow),
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = _as_database_error(e)
            logger.error(
                f"{type(e).__name__} in store session: {e}",
                extra={"error_code": error.code, "operation": error.operation},
            )
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def readiness_checks(self) -> dict[str, bool]:
        """{"database": ok, "members": ok, "notifications": ok}."""
        checks = {"database": False, **{name: False for name in READINESS_TABLES}}
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
                checks["database"] = True
                for name, model in READINESS_TABLES.items():
                    await db.execute(select(model.id).limit(1))
                    checks[name] = True
        except DatabaseError as e:
            logger.error(f"Readiness check failed: {e.message}")
        return checks

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session shared by get_caller and the controllers."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
