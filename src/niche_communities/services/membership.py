"""Community membership coordinator.

Membership is stored once, as ``CommunityMember`` rows. The community roster
and the user's own community list are both read from that relation, so a
join or leave is a single durable write and the two sides cannot drift
apart. The notification for a join, leave or removal is appended only after
that write has been committed.
"""

from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from niche_communities.core.settings import settings
from niche_communities.models import (
    Community,
    CommunityMember,
    MemberRole,
    NotificationType,
    User,
)
from niche_communities.schemas.community import MemberResponse, MembershipResponse

from .errors import AuthorizationError, BackendError, ConflictError, NotFoundError, ValidationError
from .notifications import NotificationHub, emit_notification, get_notification_hub

logger = logging.getLogger(__name__)


def _escape_like(text: str) -> str:
    # Match % and _ literally in ILIKE patterns.
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class MembershipCoordinator:
    """Applies community lifecycle and membership changes for one session."""

    def __init__(self, db: Session, hub: NotificationHub | None = None) -> None:
        self.db = db
        self.hub = hub or get_notification_hub()

    # Reads

    def get_community(self, community_id: int) -> Community:
        """Return a community or raise :class:`NotFoundError`."""
        community = self.db.get(Community, community_id)
        if community is None:
            raise NotFoundError("Community not found")
        return community

    def list_communities(
        self, query: str | None = None, category: str | None = None
    ) -> list[Community]:
        """List communities, optionally filtered by a search term and a category."""
        statement = self.db.query(Community)
        if query and query.strip():
            pattern = f"%{_escape_like(query.strip())}%"
            statement = statement.filter(
                or_(
                    Community.name.ilike(pattern, escape="\\"),
                    Community.description.ilike(pattern, escape="\\"),
                )
            )
        if category:
            statement = statement.filter(
                Community.category.ilike(_escape_like(category), escape="\\")
            )
        return statement.order_by(Community.created_at.desc(), Community.id.desc()).all()

    def list_members(self, community_id: int) -> list[MemberResponse]:
        """Return member details in join order."""
        community = self.get_community(community_id)
        return [
            MemberResponse(
                user_id=membership.user_id,
                display_name=membership.user.public_name,
                photo_url=membership.user.photo_url,
                role=membership.role,
                joined_at=membership.joined_at,
            )
            for membership in community.memberships
        ]

    # Community lifecycle

    def create_community(
        self,
        creator: User,
        *,
        name: str,
        description: str = "",
        category: str = "",
        photo_url: str | None = None,
    ) -> Community:
        """Create a community whose creator is its first (admin) member."""
        name = name.strip()
        if not name:
            raise ValidationError("Community name is required")

        community = Community(
            name=name,
            description=description.strip(),
            category=category.strip(),
            photo_url=photo_url or settings.default_community_photo_url,
            created_by=creator.id,
        )
        membership = CommunityMember(
            community=community, user=creator, role=MemberRole.ADMIN.value
        )
        self.db.add_all([community, membership])
        self._commit("create community")
        self.db.refresh(community)
        logger.info("User %s created community %s", creator.id, community.id)
        return community

    def update_community(
        self,
        actor: User,
        community_id: int,
        *,
        description: str | None = None,
        category: str | None = None,
        photo_url: str | None = None,
    ) -> Community:
        """Apply creator-only edits such as a new cover image."""
        community = self.get_community(community_id)
        self._require_creator(community, actor, "edit this community")

        if description is not None:
            community.description = description.strip()
        if category is not None:
            community.category = category.strip()
        if photo_url is not None:
            community.photo_url = photo_url
        self._commit("update community")
        return community

    def delete_community(self, actor: User, community_id: int) -> None:
        """Delete a community after deleting every one of its posts.

        Members are not notified.
        """
        community = self.get_community(community_id)
        self._require_creator(community, actor, "delete this community")

        try:
            for post in list(community.posts):
                self.db.delete(post)
            # Posts (with their comments and reactions) are gone before the community row.
            self.db.flush()
            self.db.expire(community, ["posts"])
            for membership in list(community.memberships):
                membership.user.memberships.remove(membership)
            self.db.delete(community)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to delete community %s: %s", community_id, exc)
            raise BackendError("Failed to delete community") from exc

        logger.info("User %s deleted community %s", actor.id, community_id)

    # Membership transitions

    def join(self, user: User, community_id: int) -> MembershipResponse:
        """Add ``user`` to the community and notify its creator."""
        community = self.get_community(community_id)
        if self._membership(community_id, user.id) is not None:
            raise ConflictError("Already a member of this community")

        role = MemberRole.ADMIN if user.id == community.created_by else MemberRole.MEMBER
        self.db.add(CommunityMember(community=community, user=user, role=role.value))
        self._commit("join community")
        logger.info("User %s joined community %s", user.id, community_id)

        emit_notification(
            self.db,
            self.hub,
            recipient_id=community.created_by,
            sender=user,
            notification_type=NotificationType.JOIN,
            community_id=community.id,
            community_name=community.name,
        )
        return self._view(community, user.id)

    def leave(self, user: User, community_id: int) -> MembershipResponse:
        """Remove ``user`` from the community and notify its creator."""
        community = self.get_community(community_id)
        membership = self._membership(community_id, user.id)
        if membership is None:
            raise NotFoundError("Not a member of this community")

        self._drop(community, membership)
        self._commit("leave community")
        logger.info("User %s left community %s", user.id, community_id)

        emit_notification(
            self.db,
            self.hub,
            recipient_id=community.created_by,
            sender=user,
            notification_type=NotificationType.LEAVE,
            community_id=community.id,
            community_name=community.name,
        )
        return self._view(community, user.id)

    def remove_member(
        self, actor: User, community_id: int, target_user_id: int
    ) -> MembershipResponse:
        """Creator-only removal of another member; the removed user is notified."""
        community = self.get_community(community_id)
        self._require_creator(community, actor, "remove members")
        if target_user_id == actor.id:
            raise ValidationError("You cannot remove yourself from the community")

        membership = self._membership(community_id, target_user_id)
        if membership is None:
            raise NotFoundError("User is not a member of this community")

        self._drop(community, membership)
        self._commit("remove member")
        logger.info(
            "User %s removed user %s from community %s", actor.id, target_user_id, community_id
        )

        emit_notification(
            self.db,
            self.hub,
            recipient_id=target_user_id,
            sender=actor,
            notification_type=NotificationType.REMOVED,
            community_id=community.id,
            community_name=community.name,
        )
        return self._view(community, target_user_id)

    # Helpers

    def _membership(self, community_id: int, user_id: int) -> CommunityMember | None:
        return self.db.get(CommunityMember, (community_id, user_id))

    def _drop(self, community: Community, membership: CommunityMember) -> None:
        # Detaching from both parents deletes the row on flush (delete-orphan).
        community.memberships.remove(membership)
        if membership in membership.user.memberships:
            membership.user.memberships.remove(membership)

    def _require_creator(self, community: Community, actor: User, action: str) -> None:
        if community.created_by != actor.id:
            raise AuthorizationError(f"Only the community creator can {action}")

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise BackendError(f"Failed to {action}") from exc

    def _view(self, community: Community, user_id: int) -> MembershipResponse:
        members = community.members
        return MembershipResponse(
            community_id=community.id,
            user_id=user_id,
            is_member=user_id in members,
            members=members,
            member_count=len(members),
        )
