"""
Thread API endpoints (posts, replies, likes).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import dependencies as auth_dependencies
from core import db

from . import repository, schemas

router = APIRouter()


@router.get("/threads")
async def get_all_threads(session: AsyncSession = Depends(db.get_session)) -> list[dict]:
    return await repository.get_all_threads(session)


@router.get("/posts")
async def get_all_posts(session: AsyncSession = Depends(db.get_session)) -> list[dict]:
    return await repository.get_all_posts(session)


@router.get("/posts/recent")
async def get_most_recent_posts(session: AsyncSession = Depends(db.get_session)) -> list[dict]:
    """
    The two newest top-level posts, for the home page.
    """
    return await repository.get_most_recent_posts(session)


@router.post("/posts")
async def create_post(
    request: schemas.CreatePostRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.create_post(
        session,
        title=request.title,
        author_id=int(current_user["id"]),
        content=request.content,
        category=request.category,
        tags=[tag.name for tag in request.tags],
    )


@router.get("/threads/{thread_id}")
async def get_thread_by_id(
    thread_id: int,
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.get_thread_by_id(session, thread_id)


@router.get("/threads/{thread_id}/replies")
async def get_replies_by_thread(
    thread_id: int,
    session: AsyncSession = Depends(db.get_session),
) -> list[dict]:
    return await repository.get_replies_by_thread(session, thread_id)


@router.post("/threads/{thread_id}/replies")
async def create_thread(
    thread_id: int,
    request: schemas.CreateReplyRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.create_thread(
        session,
        author_id=int(current_user["id"]),
        content=request.content,
        reply_to_id=thread_id,
    )


@router.post("/threads/{thread_id}/like")
async def like_thread(
    thread_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.like_thread(session, thread_id=thread_id, user_id=int(current_user["id"]))


@router.post("/threads/{thread_id}/unlike")
async def unlike_thread(
    thread_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.unlike_thread(session, thread_id=thread_id, user_id=int(current_user["id"]))


@router.delete("/threads/{thread_id}")
async def delete_thread(
    thread_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.delete_thread(session, thread_id)


@router.delete("/replies/{thread_id}")
async def delete_reply(
    thread_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.delete_reply(session, thread_id)
