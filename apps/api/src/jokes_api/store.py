from __future__ import annotations

import logging
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from jokes_api.models import JokeRecord
from jokes_shared.models import Joke

logger = logging.getLogger(__name__)

_CONNECTION_REFUSED_HINTS = (
    "1. Database server is running",
    "2. Database credentials are correct",
    "3. Database host is accessible from this machine",
)

# MySQL client error raised when the server cannot be reached.
_MYSQL_CANT_CONNECT = 2003


class JokeStoreError(RuntimeError):
    pass


class StoreUnavailableError(JokeStoreError):
    pass


class StoreQueryError(JokeStoreError):
    pass


class JokeSource(Protocol):
    def fetch_all(self) -> list[Joke]: ...


def _is_connection_refused(exc: BaseException) -> bool:
    original = exc.orig if isinstance(exc, DBAPIError) else exc
    args = getattr(original, "args", ())
    if args and args[0] == _MYSQL_CANT_CONNECT:
        return True
    if isinstance(original, ConnectionRefusedError):
        return True
    return "connection refused" in str(original).lower()


def log_connection_failure(exc: BaseException) -> None:
    logger.error("Error connecting to the database: %s", exc)
    if _is_connection_refused(exc):
        logger.error("Database connection refused. Please check if:")
        for hint in _CONNECTION_REFUSED_HINTS:
            logger.error(hint)


class JokeStore:
    """Read-only access to the ``jokes`` table through a bounded pool.

    Every call checks a connection out of the engine's pool and returns it
    before the call finishes, whether the query succeeded or not.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def _connect(self) -> Connection:
        try:
            return self._engine.connect()
        except SQLAlchemyError as exc:
            logger.error("Error getting database connection: %s", exc)
            raise StoreUnavailableError("Database connection failed") from exc

    def fetch_all(self) -> list[Joke]:
        with self._connect() as connection:
            try:
                rows = connection.execute(
                    select(JokeRecord.id, JokeRecord.title, JokeRecord.body).order_by(
                        JokeRecord.id.asc()
                    )
                ).mappings().all()
            except SQLAlchemyError as exc:
                logger.error("Error executing query: %s", exc)
                raise StoreQueryError("Failed to fetch jokes") from exc

        return [Joke.model_validate(dict(row)) for row in rows]

    def probe(self) -> bool:
        """Check that the store is reachable. Never raises."""
        try:
            with self._engine.connect():
                pass
        except SQLAlchemyError as exc:
            log_connection_failure(exc)
            return False

        logger.info("Successfully connected to database")
        return True

    def dispose(self) -> None:
        self._engine.dispose()
