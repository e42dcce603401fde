"""
Current-user dependency for the thread, project and profile routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import db

from . import service


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    if not authorization or not authorization.strip():
        raise _unauthorized("Missing Authorization header.")

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized("Authorization must be: Bearer <token>.")
    return token.strip()


async def get_current_user(
    access_token: str = Depends(get_bearer_token),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await service.get_user_from_access_token(session, access_token)
