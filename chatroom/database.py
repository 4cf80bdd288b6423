"""Database configuration and connection management."""

from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


class Database:
    """Owns the async engine and the session factory for one process.

    Built by the application entry point and handed to whatever needs a
    session; nothing in the services reaches for a global engine.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        connect_args: Dict[str, Any] = {}
        # only SQLite needs that arg
        if make_url(url).drivername.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        self.engine: AsyncEngine = create_async_engine(
            url, echo=echo, future=True, connect_args=connect_args
        )
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init(self) -> None:
        """Create tables that do not exist yet."""
        # Import models so they register with Base.metadata
        from chatroom.models import db  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Close database connections on shutdown."""
        await self.engine.dispose()

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self.session_factory() as session:
            try:
                yield session
            finally:
                await session.close()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    database: Database = request.app.state.database
    async for session in database.session():
        yield session
