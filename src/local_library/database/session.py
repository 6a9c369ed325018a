"""
Engine and session handling for the catalog store.

The gateway opens one ``session_scope`` per store call on a worker thread.
A scope is a single transaction and its session is never shared, so
concurrent calls each get their own pooled connection. SQLAlchemy failures
are re-raised as ``StoreError`` with the driver exception chained.
"""

import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from ..errors import StoreError
from .schema import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _enable_foreign_keys(dbapi_connection, connection_record):  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``database_url``.

    SQLite connections enforce foreign keys and may be used from worker
    threads. An in-memory database is pinned to one shared connection.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True, echo=echo)

    options: dict = {"connect_args": {"check_same_thread": False}, "echo": echo}
    if ":memory:" in database_url or database_url.rstrip("/").endswith(":"):
        options["poolclass"] = StaticPool

    engine = create_engine(database_url, **options)
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


class DatabaseManager:
    """Owns the engine and session factory for one catalog database."""

    def __init__(self, database_url: str | None = None):
        config = get_config()
        self.database_url = database_url or config.get_database_url()
        self.echo = config.sql_echo
        self._engine: Engine | None = None
        self._sessions: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self.database_url, self.echo)
            logger.info("Catalog store at %s", self._engine.url)
        return self._engine

    def create_session(self) -> Session:
        """A new session; returned rows stay readable after commit."""
        if self._sessions is None:
            self._sessions = sessionmaker(
                bind=self.engine, autoflush=False, expire_on_commit=False
            )
        return self._sessions()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """One transaction: commit on success, roll back on any exception."""
        session = self.create_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self, drop_existing: bool = False) -> None:
        """Create the catalog tables, dropping them first if asked."""
        if drop_existing:
            logger.warning("Dropping catalog tables")
            Base.metadata.drop_all(bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info("Catalog tables ready")

    def verify_connection(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Cannot connect to %s", self.database_url)
            return False
        return True

    def close(self) -> None:
        """Dispose of pooled connections; the manager can be reused afterwards."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._sessions = None


_db_manager: DatabaseManager | None = None


def get_db_manager(database_url: str | None = None) -> DatabaseManager:
    """The process-wide manager; ``database_url`` only applies on first use."""
    global _db_manager  # noqa: PLW0603
    if _db_manager is None:
        _db_manager = DatabaseManager(database_url)
    return _db_manager


def reset_db_manager() -> None:
    global _db_manager  # noqa: PLW0603
    if _db_manager is not None:
        _db_manager.close()
    _db_manager = None


def safe_commit(session: Session, operation: str) -> None:
    """
    Commit, rolling back on failure.

    ``IntegrityError`` is re-raised as is so the repository can tell a taken
    unique key from other constraint failures; anything else becomes
    ``StoreError``.
    """
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Commit failed during %s", operation)
        raise StoreError(f"Database operation '{operation}' failed: {e!s}") from e


def safe_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """Run ``query_func`` and raise ``StoreError(error_msg)`` on driver failure."""
    try:
        return query_func(session)
    except SQLAlchemyError as e:
        logger.exception(error_msg)
        raise StoreError(f"{error_msg}: {e!s}") from e
