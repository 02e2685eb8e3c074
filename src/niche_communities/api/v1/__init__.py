# src/niche_communities/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    communities_router,
    notifications_router,
    posts_router,
    uploads_router,
    users_router,
)

__all__ = [
    "auth_router",
    "communities_router",
    "notifications_router",
    "posts_router",
    "uploads_router",
    "users_router",
]
