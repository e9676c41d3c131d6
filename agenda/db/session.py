from typing import AsyncGenerator
import logging
from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from agenda.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and session factory for one application.

    Built once at startup, stored on ``app.state.db`` and disposed on shutdown.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = str(url)
        self.engine: AsyncEngine = create_async_engine(self.url, echo=echo, **self._engine_options(self.url))
        self.session_factory = async_sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    @staticmethod
    def _engine_options(url: str) -> dict:
        parsed = make_url(url)
        if parsed.get_backend_name() != "sqlite":
            return {}
        options: dict = {"connect_args": {"check_same_thread": False}}
        # Banco em memória só existe enquanto a conexão viver
        if parsed.database in (None, "", ":memory:"):
            options["poolclass"] = StaticPool
        return options

    async def create_all(self) -> None:
        """Create missing tables from the ORM metadata."""

        from agenda.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an `AsyncSession` and ensures cleanup.

    The session comes from the `Database` stored on ``app.state.db``.

    Yields:
        AsyncSession: Database session for request scope.
    """

    db: Database = request.app.state.db
    async with db.session_factory() as session:
        try:
            yield session
        except Exception as exc:
            # Respostas 4xx são fluxo normal, não erro de banco
            from fastapi import HTTPException
            if isinstance(exc, HTTPException) and exc.status_code < 500:
                logger.debug("Request ended with HTTP %s: %s", exc.status_code, exc.detail)
            else:
                logger.exception("DB session error: %s", exc)
            await session.rollback()
            raise
