"""
Project and idea API endpoints.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from auth import dependencies as auth_dependencies
from core import db

from . import repository, schemas

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/projects")
async def get_all_projects(session: AsyncSession = Depends(db.get_session)) -> list[dict]:
    return await repository.get_all_projects(session)


@router.post("/projects")
async def create_project(
    request: schemas.CreateProjectRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.create_project(
        session,
        title=request.title,
        description=request.description,
        owner_id=int(current_user["id"]),
    )


@router.get("/projects/{project_id}")
async def get_project_by_id(
    project_id: int,
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.get_project_by_id(session, project_id)


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.delete_project(session, project_id)


@router.post("/projects/{project_id}/collaborators")
async def add_collaborator(
    project_id: int,
    request: schemas.AddCollaboratorRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.add_collaborator(session, project_id=project_id, user_id=request.user_id)


@router.post("/projects/{project_id}/ideas")
async def create_idea(
    project_id: int,
    request: schemas.CreateIdeaRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.create_idea(
        session,
        project_id=project_id,
        title=request.title,
        description=request.description,
    )


@router.get("/projects/{project_id}/ideas/{idea_id}")
async def get_idea_by_id(
    project_id: int,
    idea_id: int,
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.get_idea_by_id(session, project_id=project_id, idea_id=idea_id)


@router.patch("/projects/{project_id}/ideas/{idea_id}")
async def update_idea(
    project_id: int,
    idea_id: int,
    request: schemas.UpdateIdeaRequest,
    _: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.update_idea(
        session,
        project_id=project_id,
        idea_id=idea_id,
        # Only fields present in the body are changed.
        changes=request.model_dump(exclude_unset=True),
    )


@router.delete("/projects/{project_id}/ideas/{idea_id}")
async def delete_idea(
    project_id: int,
    idea_id: int,
    _: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.delete_idea(session, project_id=project_id, idea_id=idea_id)


@router.get("/ideas/bookmarked")
async def get_bookmarked_ideas(
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> list[dict]:
    user_id = int(current_user["id"])
    logger.info("bookmarked_ideas_requested user_id=%s", user_id)
    return await repository.get_bookmarked_ideas(session, user_id)


@router.post("/ideas/{idea_id}/bookmark")
async def bookmark_idea(
    idea_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.bookmark_idea(session, idea_id=idea_id, user_id=int(current_user["id"]))


@router.delete("/ideas/{idea_id}/bookmark")
async def unbookmark_idea(
    idea_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    session: AsyncSession = Depends(db.get_session),
) -> dict:
    return await repository.unbookmark_idea(session, idea_id=idea_id, user_id=int(current_user["id"]))
