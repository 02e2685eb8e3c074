"""SQLAlchemy models for user accounts and profiles."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from niche_communities.db.session import Base
from niche_communities.db.time import utcnow

if TYPE_CHECKING:
    from .community import CommunityMember


class User(Base):
    """Registered account plus the public profile fields shown next to content."""

    __tablename__ = "user_account"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(Text, nullable=False, default="")
    website: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    memberships: Mapped[list[CommunityMember]] = relationship(
        "CommunityMember",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def communities(self) -> list[int]:
        """Community ids projected from the membership relation."""
        return sorted(membership.community_id for membership in self.memberships)

    @property
    def public_name(self) -> str:
        """Display name with the e-mail local part as fallback."""
        if self.display_name:
            return self.display_name
        if self.email:
            return self.email.split("@")[0]
        return "Unknown User"
