"""
Pydantic schemas for project and idea endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CreateProjectRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class AddCollaboratorRequest(BaseModel):
    user_id: int = Field(..., ge=1)


class CreateIdeaRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class UpdateIdeaRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
