# src/niche_communities/models/__init__.py
"""SQLAlchemy models for the Niche Communities service."""

from .comment import Comment
from .community import Community, CommunityMember, MemberRole
from .notification import Notification, NotificationType
from .post import Post, PostReaction, ReactionKind
from .revoked_token import RevokedToken
from .user import User

__all__ = [
    "Comment",
    "Community", "CommunityMember", "MemberRole",
    "Notification", "NotificationType",
    "Post", "PostReaction", "ReactionKind",
    "RevokedToken",
    "User",
]
