"""SQLAlchemy model for comments and replies."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from niche_communities.db.session import Base
from niche_communities.db.time import utcnow

if TYPE_CHECKING:
    from .post import Post


class Comment(Base):
    """Comment on a post, or a reply when ``parent_id`` is set.

    Each row carries its own stable identifier so that replies and deletions
    never depend on the position of a comment in a list.
    """

    __tablename__ = "comment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Replies point at the top-level comment they answer.
    parent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("comment.id", ondelete="CASCADE"), nullable=True
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("user_account.id"), nullable=False
    )
    author_display_name: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    post: Mapped[Post] = relationship("Post", back_populates="comment_rows")
    reply_rows: Mapped[list[Comment]] = relationship(
        "Comment",
        cascade="all",
    )

    @property
    def replies(self) -> list[Comment]:
        """Replies in the order they were added."""
        return sorted(self.reply_rows, key=lambda c: c.id)
