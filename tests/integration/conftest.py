import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from auth_service.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from auth_service.api.app import create_app
from auth_service.client.session_client import RefreshCoalescer, SessionClient
from auth_service.depends import get_unit_of_work


class TestConfig(ApplicationConfig):
    """Cheap Argon2 parameters; tables are created by the engine fixture"""

    LOG_LEVEL = "WARNING"
    CREATE_TABLES_ON_STARTUP = False
    JWT_ACCESS_SECRET = "integration-access-secret-0123456789"
    JWT_REFRESH_SECRET = "integration-refresh-secret-0123456789"
    ARGON2_MEMORY_COST = 1024
    ARGON2_TIME_COST = 1


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def app(db_session):
    app = create_app(TestConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def session_client(app):
    async with SessionClient(
        "http://test",
        transport=ASGITransport(app=app),
        coalescer=RefreshCoalescer(),
    ) as sc:
        yield sc


@pytest.fixture
def register_user(client):
    async def register(
        email="user@example.com", username="alice", password="SecurePass123!"
    ):
        return await client.post(
            "/auth/register",
            json={"email": email, "username": username, "password": password},
        )

    return register
