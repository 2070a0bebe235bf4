from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase

from jokes_api.config import Settings


class Base(DeclarativeBase):
    pass


def _connect_args(settings: Settings) -> dict[str, object]:
    backend = settings.store_url().get_backend_name()
    if backend in {"mysql", "postgresql"}:
        return {"connect_timeout": int(settings.db_connect_timeout_seconds)}
    if backend == "sqlite":
        return {"timeout": settings.db_connect_timeout_seconds, "check_same_thread": False}
    return {}


def create_store_engine(settings: Settings) -> Engine:
    """Build the bounded connection pool backing the jokes store.

    Callers wait for a free connection once ``db_pool_size`` connections are
    checked out; there is no overflow and no queue-length limit.
    """
    return create_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=None,
        pool_pre_ping=True,
        echo=settings.db_echo,
        connect_args=_connect_args(settings),
    )
