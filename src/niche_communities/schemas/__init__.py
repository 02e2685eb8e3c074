# src/niche_communities/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .auth import LoginRequest, SignupRequest, TokenResponse
from .community import (
    CommunityCreate,
    CommunityResponse,
    CommunityUpdate,
    MemberResponse,
    MembershipResponse,
)
from .notification import MarkAllReadResponse, NotificationResponse, NotificationSnapshot
from .post import (
    CommentCreate,
    CommentResponse,
    PostCreate,
    PostResponse,
    ReactionRequest,
    ReactionStateResponse,
)
from .upload import UploadResponse
from .user import PrivateUserResponse, ProfileUpdate, UserResponse

__all__ = [
    "LoginRequest", "SignupRequest", "TokenResponse",
    "CommunityCreate", "CommunityResponse", "CommunityUpdate",
    "MemberResponse", "MembershipResponse",
    "MarkAllReadResponse", "NotificationResponse", "NotificationSnapshot",
    "CommentCreate", "CommentResponse", "PostCreate", "PostResponse",
    "ReactionRequest", "ReactionStateResponse",
    "UploadResponse",
    "PrivateUserResponse", "ProfileUpdate", "UserResponse",
]
