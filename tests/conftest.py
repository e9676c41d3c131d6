"""
Test configuration and fixtures for the Agenda de Contatos test suite.
Provides database setup, an HTTP client and common test data.
"""

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from agenda.main import app
from agenda.db.base import Base
from agenda.db import models  # noqa: F401
from agenda.db.session import get_db

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False
)

# Create test session maker
TestSessionLocal = async_sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=test_engine,
    class_=AsyncSession
)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    # Create all tables
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    # Create session
    async with TestSessionLocal() as session:
        yield session
    
    # Drop all tables after test
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database session override."""
    
    async def override_get_db():
        yield db_session
    
    app.dependency_overrides[get_db] = override_get_db
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    
    app.dependency_overrides.clear()


@pytest.fixture
def sample_contato_data():
    """Sample contact payload."""
    return {
        "nome": "Ana",
        "sobrenome": "Souza",
        "data_nascimento": "1990-05-10",
        "telefone": "11999990000",
        "familia": True,
    }


class TestDataFactory:
    """Factory class for creating test data."""

    @staticmethod
    async def create_contato(
        session: AsyncSession,
        nome: str = "Test Contact",
        telefone: str = "11900000000",
        **fields,
    ):
        """Create a test contact directly through the ORM."""
        from agenda.db.models import Contato

        contato = Contato(nome=nome, telefone=telefone, **fields)
        session.add(contato)
        await session.flush()
        await session.refresh(contato)
        return contato


@pytest.fixture
def test_factory():
    """Provide access to test data factory."""
    return TestDataFactory
