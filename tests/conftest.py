from __future__ import annotations

import itertools

import pytest
from httpx import ASGITransport, AsyncClient

import main
from auth import security
from auth.models import Profile, User
from core import db


@pytest.fixture
async def database():
    await db.init_engine("sqlite+aiosqlite://")
    await db.create_all()
    try:
        yield
    finally:
        await db.close_engine()


@pytest.fixture
async def session(database):
    async with db.session_factory()() as session:
        yield session


@pytest.fixture
def make_user(session):
    counter = itertools.count(1)

    async def _make_user(username: str | None = None) -> User:
        name = username or f"user{next(counter)}"
        user = User(username=name, email=f"{name}@example.com", password_hash="not-a-real-hash")
        user.profile = Profile(display_name=name.title())
        session.add(user)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
async def client(database):
    # Requests share the single in-memory connection with `session`; keep API
    # calls sequential so their transactions do not interleave.
    transport = ASGITransport(app=main.app)
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        token = security.build_access_token(user_id=user.id, username=user.username)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
