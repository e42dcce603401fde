"""
Thread persistence (SQLAlchemy ORM).

Posts and replies share the `threads` table. Every function takes the
request's session as its first argument.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import delete, exists, func, insert, not_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core import errors

from . import graph
from .models import Tag, Thread, thread_likes

logger = logging.getLogger(__name__)

RECENT_POSTS_LIMIT = 2


async def _get_thread(session: AsyncSession, thread_id: int, *, for_update: bool = False) -> Thread:
    stmt = select(Thread).where(Thread.id == thread_id).execution_options(populate_existing=True)
    if for_update:
        stmt = stmt.with_for_update()
    thread = await session.scalar(stmt)
    if thread is None:
        raise errors.NotFoundError(f"Thread [{thread_id}] not found")
    return thread


async def get_all_threads(session: AsyncSession) -> list[dict]:
    threads = (
        await session.scalars(
            select(Thread).order_by(Thread.id.asc()).execution_options(populate_existing=True)
        )
    ).all()
    return await graph.expand(session, threads, graph.LIST_GRAPH)


async def get_all_posts(session: AsyncSession) -> list[dict]:
    threads = (
        await session.scalars(
            select(Thread)
            .where(Thread.reply_to_id.is_(None))
            .order_by(Thread.id.asc())
            .execution_options(populate_existing=True)
        )
    ).all()
    return await graph.expand(session, threads, graph.LIST_GRAPH)


async def get_replies_by_thread(session: AsyncSession, thread_id: int) -> list[dict]:
    threads = (
        await session.scalars(
            select(Thread)
            .where(Thread.reply_to_id == thread_id)
            .order_by(Thread.created_at.asc(), Thread.id.asc())
            .execution_options(populate_existing=True)
        )
    ).all()
    return [graph.thread_to_dict(thread) for thread in threads]


async def get_thread_by_id(session: AsyncSession, thread_id: int) -> dict:
    thread = await _get_thread(session, thread_id)
    return await graph.expand_one(session, thread, graph.DETAIL_GRAPH)


async def upsert_tags(session: AsyncSession, names: Iterable[str]) -> list[Tag]:
    """
    Return a Tag per distinct name, creating the ones that do not exist yet.
    """
    wanted: list[str] = []
    for name in names:
        name = (name or "").strip()
        if name and name not in wanted:
            wanted.append(name)
    if not wanted:
        return []

    existing = {
        tag.name: tag
        for tag in (await session.scalars(select(Tag).where(Tag.name.in_(wanted)))).all()
    }
    tags: list[Tag] = []
    for name in wanted:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            session.add(tag)
        tags.append(tag)
    return tags


async def create_post(
    session: AsyncSession,
    *,
    title: str,
    author_id: int,
    content: str,
    category: str,
    tags: Iterable[str] = (),
) -> dict:
    thread = Thread(
        title=title,
        author_id=author_id,
        content=content,
        category=category,
        reply_to_id=None,
    )
    thread.tags = await upsert_tags(session, tags)
    session.add(thread)
    await session.commit()
    return graph.thread_to_dict(thread, graph.WITH_TAGS)


async def create_thread(
    session: AsyncSession,
    *,
    author_id: int,
    content: str,
    reply_to_id: int,
) -> dict:
    parent = await session.scalar(select(Thread).where(Thread.id == reply_to_id))
    if parent is None:
        raise errors.NotFoundError(f"Thread [{reply_to_id}] not found to reply to")

    reply = Thread(
        author_id=author_id,
        content=content,
        reply_to_id=parent.id,
        category=parent.category,
    )
    reply.tags = list(parent.tags)
    session.add(reply)
    await session.commit()

    created = await _get_thread(session, reply.id)
    return await graph.expand_one(session, created, graph.REPLY_GRAPH)


async def _has_liked(session: AsyncSession, *, thread_id: int, user_id: int) -> bool:
    return bool(
        await session.scalar(
            select(
                exists().where(
                    thread_likes.c.thread_id == thread_id,
                    thread_likes.c.user_id == user_id,
                )
            )
        )
    )


async def like_thread(session: AsyncSession, *, thread_id: int, user_id: int) -> dict:
    await _get_thread(session, thread_id, for_update=True)

    if await _has_liked(session, thread_id=thread_id, user_id=user_id):
        raise errors.AlreadyLikedError(f"User [{user_id}] has already liked thread [{thread_id}]")

    try:
        await session.execute(insert(thread_likes).values(thread_id=thread_id, user_id=user_id))
    except IntegrityError as exc:
        await session.rollback()
        # Only a concurrent like for the same pair counts as a duplicate.
        if not await _has_liked(session, thread_id=thread_id, user_id=user_id):
            raise
        raise errors.AlreadyLikedError(
            f"User [{user_id}] has already liked thread [{thread_id}]"
        ) from exc

    await session.execute(
        update(Thread).where(Thread.id == thread_id).values(like_count=Thread.like_count + 1)
    )
    await session.commit()

    return graph.thread_to_dict(await _get_thread(session, thread_id))


async def unlike_thread(session: AsyncSession, *, thread_id: int, user_id: int) -> dict:
    await _get_thread(session, thread_id, for_update=True)

    result = await session.execute(
        delete(thread_likes).where(
            thread_likes.c.thread_id == thread_id,
            thread_likes.c.user_id == user_id,
        )
    )
    if result.rowcount == 0:
        await session.rollback()
        raise errors.NotLikedError(f"User [{user_id}] has not liked thread [{thread_id}]")

    await session.execute(
        update(Thread).where(Thread.id == thread_id).values(like_count=Thread.like_count - 1)
    )
    await session.commit()

    return graph.thread_to_dict(await _get_thread(session, thread_id))


async def _count_replies(session: AsyncSession, thread_id: int) -> int:
    return int(
        await session.scalar(
            select(func.count()).select_from(Thread).where(Thread.reply_to_id == thread_id)
        )
        or 0
    )


async def delete_thread(session: AsyncSession, thread_id: int) -> dict:
    """
    Delete a thread.

    Posts and childless replies are removed (descendants cascade). A reply
    that has replies of its own keeps its row and has `deleted` toggled.
    """
    thread = await _get_thread(session, thread_id, for_update=True)

    if not thread.is_post and await _count_replies(session, thread_id) > 0:
        await session.execute(
            update(Thread).where(Thread.id == thread_id).values(deleted=not_(Thread.deleted))
        )
        await session.commit()
        return graph.thread_to_dict(await _get_thread(session, thread_id))

    removed = graph.thread_to_dict(thread)
    await session.execute(delete(Thread).where(Thread.id == thread_id))
    await session.commit()
    return removed


async def delete_reply(session: AsyncSession, thread_id: int) -> dict:
    return await delete_thread(session, thread_id)


async def get_most_recent_posts(session: AsyncSession) -> list[dict]:
    try:
        threads = (
            await session.scalars(
                select(Thread)
                .where(Thread.reply_to_id.is_(None))
                .order_by(Thread.created_at.desc(), Thread.id.desc())
                .limit(RECENT_POSTS_LIMIT)
                .execution_options(populate_existing=True)
            )
        ).all()
        return await graph.expand(session, threads, graph.RECENT_GRAPH)
    except Exception as exc:
        logger.exception("recent_posts_fetch_failed")
        raise errors.FetchFailedError("Unable to fetch recent threads.") from exc
