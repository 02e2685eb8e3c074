"""SQLAlchemy models for communities and their membership relation."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from niche_communities.db.session import Base
from niche_communities.db.time import utcnow

if TYPE_CHECKING:
    from .post import Post
    from .user import User


class MemberRole(str, Enum):
    """Role held by a member inside a community."""

    ADMIN = "admin"
    MEMBER = "member"


class Community(Base):
    """Named group with a creator and a member roster."""

    __tablename__ = "community"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(Text, nullable=False, default="")
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("user_account.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    memberships: Mapped[list[CommunityMember]] = relationship(
        "CommunityMember",
        back_populates="community",
        cascade="all, delete-orphan",
        order_by=lambda: (CommunityMember.joined_at, CommunityMember.user_id),
    )
    posts: Mapped[list[Post]] = relationship(
        "Post",
        back_populates="community",
        cascade="all, delete-orphan",
    )

    @property
    def members(self) -> list[int]:
        """User ids projected from the membership relation, in join order."""
        return [membership.user_id for membership in self.memberships]


class CommunityMember(Base):
    """Authoritative membership relation between users and communities.

    Both ``Community.members`` and ``User.communities`` are read from this
    table, so the two sides can never disagree.
    """

    __tablename__ = "community_member"

    community_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("community.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("user_account.id", ondelete="CASCADE"), primary_key=True
    )
    role: Mapped[str] = mapped_column(Text, nullable=False, default=MemberRole.MEMBER.value)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    community: Mapped[Community] = relationship("Community", back_populates="memberships")
    user: Mapped[User] = relationship("User", back_populates="memberships")
