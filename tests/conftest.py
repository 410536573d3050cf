import os

# Settings are read at import time; point the app at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from smartauto.core.database import Base, enable_sqlite_foreign_keys
from smartauto.core.deps import get_db
from smartauto.core.security import create_user_token, get_password_hash
from smartauto.main import app
from smartauto.models.enums import Role
from smartauto.models.user import User
from smartauto.models.vehicle import Vehicle
from smartauto.models import category, rental  # noqa: F401

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(session_maker, username: str, role: Role = Role.customer, name: str = None) -> User:
    async with session_maker() as session:
        user = User(
            username=username,
            password_hash=get_password_hash(DEFAULT_PASSWORD),
            name=name or username.capitalize(),
            phone="11999990000",
            email=f"{username}@example.com",
            state="SP",
            city="Campinas",
            street="Rua A",
            number=10,
            role=role.value,
        )
        session.add(user)
        await session.commit()
        return user


async def make_vehicle(
    session_maker,
    model: str = "Corolla",
    daily_rate: float = 100.0,
    year: int = 2022,
    available: bool = True,
) -> Vehicle:
    async with session_maker() as session:
        vehicle = Vehicle(
            make="Toyota",
            model=model,
            year=year,
            color="Silver",
            daily_rate=daily_rate,
            available=available,
        )
        session.add(vehicle)
        await session.commit()
        return vehicle


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
async def customer(session_maker):
    return await make_user(session_maker, "alice")


@pytest.fixture
async def other_customer(session_maker):
    return await make_user(session_maker, "bruno")


@pytest.fixture
async def owner(session_maker):
    return await make_user(session_maker, "olivia", role=Role.owner)


@pytest.fixture
async def other_owner(session_maker):
    return await make_user(session_maker, "otavio", role=Role.owner)


@pytest.fixture
async def admin(session_maker):
    return await make_user(session_maker, "root", role=Role.admin)


@pytest.fixture
async def vehicle(session_maker):
    return await make_vehicle(session_maker)
