"""
Pydantic schemas for thread endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TagRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)


class CreatePostRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=64)
    tags: list[TagRequest] = Field(default_factory=list)


class CreateReplyRequest(BaseModel):
    content: str = Field(..., min_length=1)
