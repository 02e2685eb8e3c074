"""Post, comment and reaction schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a post; content or media is required."""

    content: str = Field("", max_length=5000)
    media_url: str | None = None


class CommentCreate(BaseModel):
    """Schema for adding a comment or a reply."""

    content: str = Field(..., max_length=2000)


class ReactionRequest(BaseModel):
    """Reaction kind to toggle on a post."""

    kind: str


class ReplyResponse(BaseModel):
    """Reply attached to a comment."""

    id: int
    author_id: int
    author_display_name: str
    content: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentResponse(ReplyResponse):
    """Top-level comment with its replies."""

    replies: list[ReplyResponse] = Field(default_factory=list)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    community_id: int
    author_id: int
    author_display_name: str
    author_photo_url: str | None
    content: str
    media_url: str | None
    created_at: datetime
    reactions: dict[str, list[int]] = Field(default_factory=dict)
    comments: list[CommentResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ReactionStateResponse(BaseModel):
    """Reaction mapping after a toggle."""

    post_id: int
    kind: str
    active: bool
    reactions: dict[str, list[int]]
