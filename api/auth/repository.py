"""
Auth persistence helpers.
"""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Profile, User


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_username(username: str) -> str:
    return (username or "").strip()


def profile_to_dict(profile: Profile | None) -> dict | None:
    if profile is None:
        return None
    return {
        "id": profile.id,
        "display_name": profile.display_name,
        "bio": profile.bio,
        "avatar_url": profile.avatar_url,
    }


def user_to_dict(user: User, *, with_profile: bool = False) -> dict:
    row = {
        "id": user.id,
        "username": user.username,
        "created_at": user.created_at,
    }
    if with_profile:
        row["profile"] = profile_to_dict(user.profile)
    return row


async def create_user(
    session: AsyncSession,
    *,
    username: str,
    email: str,
    password_hash: str,
    display_name: str | None = None,
) -> User:
    user = User(
        username=normalize_username(username),
        email=normalize_email(email),
        password_hash=password_hash,
    )
    user.profile = Profile(display_name=display_name or normalize_username(username))
    session.add(user)
    await session.commit()
    return user


async def get_user_by_username_or_email(
    session: AsyncSession,
    *,
    username: str,
    email: str,
) -> User | None:
    return await session.scalar(
        select(User).where(
            or_(
                User.username == normalize_username(username),
                func.lower(User.email) == normalize_email(email),
            )
        )
    )


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    return await session.scalar(select(User).where(User.username == normalize_username(username)))


async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    return await session.get(User, user_id)
