# src/niche_communities/models/post.py
"""SQLAlchemy models for posts and reactions."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from niche_communities.db.session import Base
from niche_communities.db.time import utcnow

if TYPE_CHECKING:
    from .comment import Comment
    from .community import Community


class ReactionKind(str, Enum):
    """Fixed set of reactions a user may toggle on a post."""

    LIKE = "like"
    LOVE = "love"
    LAUGH = "laugh"
    WOW = "wow"
    SAD = "sad"
    ANGRY = "angry"


class Post(Base):
    """Content posted by a member inside one community.

    Author display fields are captured when the post is created and are not
    refreshed when the author later edits their profile.
    """

    __tablename__ = "post"
    __table_args__ = (Index("ix_post_community_created", "community_id", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("community.id", ondelete="CASCADE"), nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("user_account.id"), nullable=False
    )
    author_display_name: Mapped[str] = mapped_column(Text, nullable=False)
    author_photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    community: Mapped[Community] = relationship("Community", back_populates="posts")
    reaction_rows: Mapped[list[PostReaction]] = relationship(
        "PostReaction",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    comment_rows: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
    )

    @property
    def reactions(self) -> dict[str, list[int]]:
        """Reaction kind mapped to the ids of users holding it."""
        grouped: dict[str, list[int]] = {}
        for row in sorted(self.reaction_rows, key=lambda r: (r.kind, r.user_id)):
            grouped.setdefault(row.kind, []).append(row.user_id)
        return grouped

    @property
    def comments(self) -> list[Comment]:
        """Top-level comments, newest first."""
        top_level = [c for c in self.comment_rows if c.parent_id is None]
        return sorted(top_level, key=lambda c: c.id, reverse=True)


class PostReaction(Base):
    """One user's reaction of one kind on a post."""

    __tablename__ = "post_reaction"

    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("user_account.id"), primary_key=True
    )
    # Composite primary key keeps at most one row per (post, user, kind).
    kind: Mapped[str] = mapped_column(Text, primary_key=True)

    post: Mapped[Post] = relationship("Post", back_populates="reaction_rows")
