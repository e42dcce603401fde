"""
Project and idea persistence (SQLAlchemy ORM).
"""

from __future__ import annotations

from sqlalchemy import delete, exists, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from auth.models import User
from auth.repository import user_to_dict
from core import errors
from core.db import utc_now

from .models import Idea, Project, idea_bookmarks


def idea_to_dict(idea: Idea) -> dict:
    return {
        "id": idea.id,
        "project_id": idea.project_id,
        "title": idea.title,
        "description": idea.description,
        "created_at": idea.created_at,
        "updated_at": idea.updated_at,
    }


def project_to_dict(project: Project) -> dict:
    return {
        "id": project.id,
        "title": project.title,
        "description": project.description,
        "created_at": project.created_at,
        "collaborators": [user_to_dict(user) for user in project.collaborators],
        "ideas": [idea_to_dict(idea) for idea in project.ideas],
    }


async def _get_project(session: AsyncSession, project_id: int) -> Project:
    project = await session.get(Project, project_id, populate_existing=True)
    if project is None:
        raise errors.NotFoundError(f"Project [{project_id}] not found")
    return project


async def _get_idea(session: AsyncSession, idea_id: int, *, project_id: int | None = None) -> Idea:
    stmt = select(Idea).where(Idea.id == idea_id).execution_options(populate_existing=True)
    if project_id is not None:
        stmt = stmt.where(Idea.project_id == project_id)
    idea = await session.scalar(stmt)
    if idea is None:
        raise errors.NotFoundError(f"Idea [{idea_id}] not found")
    return idea


async def get_all_projects(session: AsyncSession) -> list[dict]:
    projects = (
        await session.scalars(
            select(Project).order_by(Project.id.asc()).execution_options(populate_existing=True)
        )
    ).all()
    return [project_to_dict(project) for project in projects]


async def get_project_by_id(session: AsyncSession, project_id: int) -> dict:
    return project_to_dict(await _get_project(session, project_id))


async def get_idea_by_id(session: AsyncSession, *, project_id: int, idea_id: int) -> dict:
    return idea_to_dict(await _get_idea(session, idea_id, project_id=project_id))


async def create_project(
    session: AsyncSession,
    *,
    title: str,
    description: str | None,
    owner_id: int,
) -> dict:
    owner = await session.get(User, owner_id)
    if owner is None:
        raise errors.NotFoundError(f"User [{owner_id}] not found")

    project = Project(title=title, description=description)
    project.collaborators = [owner]
    project.ideas = []
    session.add(project)
    await session.commit()
    return project_to_dict(project)


async def add_collaborator(session: AsyncSession, *, project_id: int, user_id: int) -> dict:
    project = await _get_project(session, project_id)
    user = await session.get(User, user_id)
    if user is None:
        raise errors.NotFoundError(f"User [{user_id}] not found")

    if all(collaborator.id != user.id for collaborator in project.collaborators):
        project.collaborators.append(user)
        await session.commit()
    return project_to_dict(project)


async def create_idea(
    session: AsyncSession,
    *,
    project_id: int,
    title: str,
    description: str | None,
) -> dict:
    project = await _get_project(session, project_id)
    idea = Idea(project_id=project.id, title=title, description=description)
    session.add(idea)
    await session.commit()
    return idea_to_dict(idea)


async def update_idea(
    session: AsyncSession,
    *,
    project_id: int,
    idea_id: int,
    changes: dict,
) -> dict:
    idea = await _get_idea(session, idea_id, project_id=project_id)
    if changes.get("title") is not None:
        idea.title = changes["title"]
    if "description" in changes:
        idea.description = changes["description"]
    idea.updated_at = utc_now()
    await session.commit()
    return idea_to_dict(idea)


async def delete_project(session: AsyncSession, project_id: int) -> dict:
    project = await _get_project(session, project_id)
    removed = project_to_dict(project)
    await session.delete(project)
    await session.commit()
    return removed


async def delete_idea(session: AsyncSession, *, project_id: int, idea_id: int) -> dict:
    idea = await _get_idea(session, idea_id, project_id=project_id)
    removed = idea_to_dict(idea)
    await session.delete(idea)
    await session.commit()
    return removed


async def get_bookmarked_ideas(session: AsyncSession, user_id: int) -> list[dict]:
    ideas = (
        await session.scalars(
            select(Idea)
            .join(idea_bookmarks, idea_bookmarks.c.idea_id == Idea.id)
            .where(idea_bookmarks.c.user_id == user_id)
            .order_by(Idea.id.asc())
        )
    ).all()
    return [idea_to_dict(idea) for idea in ideas]


async def bookmark_idea(session: AsyncSession, *, idea_id: int, user_id: int) -> dict:
    idea = await _get_idea(session, idea_id)
    already = await session.scalar(
        select(
            exists().where(
                idea_bookmarks.c.idea_id == idea_id,
                idea_bookmarks.c.user_id == user_id,
            )
        )
    )
    if not already:
        await session.execute(insert(idea_bookmarks).values(idea_id=idea_id, user_id=user_id))
        await session.commit()
    return idea_to_dict(idea)


async def unbookmark_idea(session: AsyncSession, *, idea_id: int, user_id: int) -> dict:
    idea = await _get_idea(session, idea_id)
    await session.execute(
        delete(idea_bookmarks).where(
            idea_bookmarks.c.idea_id == idea_id,
            idea_bookmarks.c.user_id == user_id,
        )
    )
    await session.commit()
    return idea_to_dict(idea)
