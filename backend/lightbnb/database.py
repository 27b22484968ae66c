"""Async SQLAlchemy engine, session factory, and declarative base."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from lightbnb.config import settings


def _engine_options(url: str) -> dict:
    options: dict = {"echo": settings.db_echo, "pool_pre_ping": True}
    # SQLite engines use a single-connection pool that takes no sizing arguments.
    if not url.startswith("sqlite"):
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return options


engine = create_async_engine(
    settings.async_database_url,
    **_engine_options(settings.async_database_url),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class SerialPrimaryKeyMixin:
    """Mixin that adds an auto-incrementing integer primary key column."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)


# Session factory used by the query service. Tests point it at their own engine.
_session_factory: async_sessionmaker[AsyncSession] = async_session_factory


def set_session_factory(factory) -> None:
    global _session_factory
    _session_factory = factory


def get_session_factory():
    return _session_factory


async def dispose_engine() -> None:
    """Close every pooled connection held by the module engine."""
    await engine.dispose()
