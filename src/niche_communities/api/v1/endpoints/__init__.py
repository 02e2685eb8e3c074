# src/niche_communities/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .communities import router as communities_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .uploads import router as uploads_router
from .users import router as users_router

__all__ = [
    "auth_router",
    "communities_router",
    "notifications_router",
    "posts_router",
    "uploads_router",
    "users_router",
]
