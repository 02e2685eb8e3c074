# src/niche_communities/services/__init__.py
"""Business logic services for the Niche Communities service."""

from .interactions import InteractionCoordinator
from .membership import MembershipCoordinator
from .notifications import NotificationHub, get_notification_hub
from .uploads import ImageUploader

__all__ = [
    "InteractionCoordinator",
    "MembershipCoordinator",
    "NotificationHub",
    "get_notification_hub",
    "ImageUploader",
]
