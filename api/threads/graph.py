"""
Thread graph assembly.

Reply trees are never walked through ORM relationships. Each level is one
query for the children of the previous level's ids; children are grouped by
`reply_to_id` and attached to their parent nodes by id.

A graph shape is a nested mapping naming what each level carries:

    {"author": True, "liked_by": True, "tags": True, "replies": {...}}

`"author"` includes the author's profile. `"replies"` maps to the shape of
the next level; an empty mapping yields bare child rows.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from auth.repository import user_to_dict

from .models import Tag, Thread

Graph = Mapping[str, Any]

BARE: Graph = {}

# Lists: replies two levels deep, only the first level carries likers.
LIST_GRAPH: Graph = {
    "author": True,
    "liked_by": True,
    "tags": True,
    "replies": {
        "liked_by": True,
        "replies": BARE,
    },
}

# Single thread: authors and likers on both reply levels.
DETAIL_GRAPH: Graph = {
    "author": True,
    "liked_by": True,
    "tags": True,
    "replies": {
        "author": True,
        "liked_by": True,
        "replies": {
            "author": True,
            "liked_by": True,
            "replies": BARE,
        },
    },
}

REPLY_GRAPH: Graph = {
    "author": True,
    "liked_by": True,
    "tags": True,
    "replies": {
        "author": True,
        "liked_by": True,
        "replies": BARE,
    },
}

RECENT_GRAPH: Graph = {
    "author": True,
    "liked_by": True,
}

WITH_TAGS: Graph = {
    "tags": True,
}


def tag_to_dict(tag: Tag) -> dict:
    return {"id": tag.id, "name": tag.name}


def thread_to_dict(thread: Thread, graph: Graph = BARE) -> dict:
    node: dict[str, Any] = {
        "id": thread.id,
        "title": thread.title,
        "content": thread.content,
        "category": thread.category,
        "author_id": thread.author_id,
        "created_at": thread.created_at,
        "like_count": thread.like_count,
        "deleted": thread.deleted,
        "reply_to_id": thread.reply_to_id,
    }
    if graph.get("author"):
        node["author"] = user_to_dict(thread.author, with_profile=True)
    if graph.get("liked_by"):
        node["liked_by"] = [user_to_dict(user) for user in thread.liked_by]
    if graph.get("tags"):
        node["tags"] = [tag_to_dict(tag) for tag in thread.tags]
    return node


async def _children_by_parent(
    session: AsyncSession,
    parent_ids: Sequence[int],
    graph: Graph,
) -> dict[int, list[dict]]:
    children = (
        await session.scalars(
            select(Thread)
            .where(Thread.reply_to_id.in_(parent_ids))
            .order_by(Thread.created_at.asc(), Thread.id.asc())
            .execution_options(populate_existing=True)
        )
    ).all()

    grouped: dict[int, list[dict]] = defaultdict(list)
    for node in await expand(session, children, graph):
        grouped[node["reply_to_id"]].append(node)
    return grouped


async def expand(session: AsyncSession, threads: Sequence[Thread], graph: Graph) -> list[dict]:
    """
    Serialize `threads` with the relations and reply levels named by `graph`.
    """
    nodes = [thread_to_dict(thread, graph) for thread in threads]

    reply_graph = graph.get("replies")
    if reply_graph is None or not nodes:
        return nodes

    children = await _children_by_parent(session, [node["id"] for node in nodes], reply_graph)
    for node in nodes:
        node["replies"] = children.get(node["id"], [])
    return nodes


async def expand_one(session: AsyncSession, thread: Thread, graph: Graph) -> dict:
    return (await expand(session, [thread], graph))[0]
