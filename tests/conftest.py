import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import date
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base_class import Base
from app.db.session import get_db
from app.main import fastapi_app
from app.models import User
from app.security import create_access_token
from app.socket_instance import sio


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=fastapi_app), base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def sio_emit(monkeypatch):
    emit = AsyncMock()
    monkeypatch.setattr(sio, "emit", emit)
    return emit


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _make_user(
        gender: Optional[str] = None,
        preferences: Optional[Dict[str, Any]] = None,
        email: Optional[str] = None,
        **kwargs,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            full_name=kwargs.pop("full_name", f"User {n}"),
            username=kwargs.pop("username", f"user{n}"),
            email=email if email is not None else f"user{n}@example.com",
            gender=gender,
            birthdate=kwargs.pop("birthdate", date(1995, 1, n % 28 + 1)),
            bio=kwargs.pop("bio", f"Bio of user {n}"),
            avatar_url=kwargs.pop("avatar_url", f"https://img.example.com/{n}.png"),
            preferences=preferences,
            **kwargs,
        )
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth_headers
