"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core import db

from . import dependencies, schemas, service

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=schemas.AuthResponse)
async def register(
    request: schemas.RegisterRequest,
    session: AsyncSession = Depends(db.get_session),
) -> schemas.AuthResponse:
    return await service.register(session, request)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    request: schemas.LoginRequest,
    session: AsyncSession = Depends(db.get_session),
) -> schemas.AuthResponse:
    return await service.login(session, request)


@router.get("/me", response_model=schemas.UserResponse)
async def me(
    current_user: dict = Depends(dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> schemas.UserResponse:
    return await service.me(session, int(current_user["id"]))
