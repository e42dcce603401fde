"""
Auth business logic.
"""

from __future__ import annotations

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import errors

from . import repository, schemas, security
from .models import User


def _to_user_response(user: User) -> schemas.UserResponse:
    return schemas.UserResponse(**repository.user_to_dict(user, with_profile=True))


def _to_auth_response(user: User) -> schemas.AuthResponse:
    return schemas.AuthResponse(
        user=_to_user_response(user),
        access_token=security.build_access_token(user_id=user.id, username=user.username),
    )


async def register(session: AsyncSession, payload: schemas.RegisterRequest) -> schemas.AuthResponse:
    existing = await repository.get_user_by_username_or_email(
        session,
        username=payload.username,
        email=payload.email,
    )
    if existing is not None:
        raise errors.ConflictError("Username or email is already registered.")

    user = await repository.create_user(
        session,
        username=payload.username,
        email=payload.email,
        password_hash=security.hash_password(payload.password),
        display_name=payload.display_name,
    )
    return _to_auth_response(user)


async def login(session: AsyncSession, payload: schemas.LoginRequest) -> schemas.AuthResponse:
    user = await repository.get_user_by_username(session, payload.username)
    if user is None or not security.verify_password(payload.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    return _to_auth_response(user)


async def get_user_from_access_token(session: AsyncSession, access_token: str) -> dict:
    try:
        user_id = security.user_id_from_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc

    user = await repository.get_user_by_id(session, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found.",
        )
    return repository.user_to_dict(user, with_profile=True)


async def me(session: AsyncSession, user_id: int) -> schemas.UserResponse:
    user = await repository.get_user_by_id(session, user_id)
    if user is None:
        raise errors.NotFoundError(f"User [{user_id}] not found")
    return _to_user_response(user)
