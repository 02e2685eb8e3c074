"""Access tokens revoked by signing out."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from niche_communities.db.session import Base
from niche_communities.db.time import utcnow


class RevokedToken(Base):
    """Token id (``jti``) that must no longer authenticate."""

    __tablename__ = "revoked_token"

    jti: Mapped[str] = mapped_column(Text, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    revoked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
