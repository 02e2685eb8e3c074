"""Interaction coordinator for posts, reactions, comments and replies.

Each mutation first changes the ORM objects held by the session, which is
the caller's local view of the post, and then commits. If the commit fails
the session is rolled back, which discards the local change, and a
:class:`BackendError` is raised. Notifications are appended after the
primary commit and never fail the action.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from niche_communities.models import (
    Comment,
    CommunityMember,
    NotificationType,
    Post,
    PostReaction,
    ReactionKind,
    User,
)

from .errors import AuthorizationError, BackendError, NotFoundError, ValidationError
from .membership import MembershipCoordinator
from .notifications import NotificationHub, emit_notification, get_notification_hub

logger = logging.getLogger(__name__)

REACTION_KINDS = tuple(kind.value for kind in ReactionKind)


def parse_reaction_kind(kind: str) -> ReactionKind:
    """Return the reaction kind named by ``kind`` or raise :class:`ValidationError`."""
    try:
        return ReactionKind(kind)
    except ValueError as err:
        raise ValidationError(
            f"Unknown reaction '{kind}'. Expected one of: {', '.join(REACTION_KINDS)}"
        ) from err


def _require_text(content: str | None, what: str) -> str:
    text = (content or "").strip()
    if not text:
        raise ValidationError(f"{what} cannot be empty")
    return text


class InteractionCoordinator:
    """Applies post-level interactions for one session."""

    def __init__(self, db: Session, hub: NotificationHub | None = None) -> None:
        self.db = db
        self.hub = hub or get_notification_hub()

    # Posts

    def get_post(self, post_id: int) -> Post:
        """Return a post or raise :class:`NotFoundError`."""
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    def list_posts(self, community_id: int) -> list[Post]:
        """Return a community's posts, newest first."""
        MembershipCoordinator(self.db, self.hub).get_community(community_id)
        return (
            self.db.query(Post)
            .filter(Post.community_id == community_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .all()
        )

    def create_post(
        self,
        author: User,
        community_id: int,
        *,
        content: str = "",
        media_url: str | None = None,
    ) -> Post:
        """Publish a post in a community the author belongs to.

        The author's display name and photo are copied onto the post. The
        community creator is notified unless they wrote the post.
        """
        community = MembershipCoordinator(self.db, self.hub).get_community(community_id)
        if self.db.get(CommunityMember, (community_id, author.id)) is None:
            raise AuthorizationError("Only members can post in this community")

        text = (content or "").strip()
        if not text and not media_url:
            raise ValidationError("A post needs text or an image")

        post = Post(
            community_id=community.id,
            author_id=author.id,
            author_display_name=author.public_name,
            author_photo_url=author.photo_url,
            content=text,
            media_url=media_url,
        )
        self.db.add(post)
        self._commit("create post")
        logger.info("User %s created post %s in community %s", author.id, post.id, community.id)

        emit_notification(
            self.db,
            self.hub,
            recipient_id=community.created_by,
            sender=author,
            notification_type=NotificationType.NEW_POST,
            community_id=community.id,
            community_name=community.name,
            post_id=post.id,
        )
        return post

    def delete_post(self, actor: User, post_id: int) -> None:
        """Delete a post together with its comments and reactions."""
        post = self.get_post(post_id)
        if post.author_id != actor.id:
            raise AuthorizationError("Only the author can delete this post")

        self.db.delete(post)
        self._commit("delete post")
        logger.info("User %s deleted post %s", actor.id, post_id)

    # Reactions

    def react(self, user: User, post_id: int, kind: str) -> tuple[bool, dict[str, list[int]]]:
        """Toggle ``user``'s reaction of ``kind`` on a post.

        Returns:
            Whether the reaction is now active, and the post's full reaction map.
        """
        reaction_kind = parse_reaction_kind(kind)
        post = self.get_post(post_id)

        existing = next(
            (
                row
                for row in post.reaction_rows
                if row.user_id == user.id and row.kind == reaction_kind.value
            ),
            None,
        )
        if existing is not None:
            post.reaction_rows.remove(existing)
        else:
            post.reaction_rows.append(PostReaction(user_id=user.id, kind=reaction_kind.value))
        self._commit("update reaction")

        active = existing is None
        logger.debug(
            "User %s %s %s on post %s",
            user.id,
            "added" if active else "removed",
            reaction_kind.value,
            post_id,
        )
        if active:
            emit_notification(
                self.db,
                self.hub,
                recipient_id=post.author_id,
                sender=user,
                notification_type=NotificationType.REACTION,
                community_id=post.community_id,
                post_id=post.id,
                reaction_kind=reaction_kind.value,
            )
        return active, post.reactions

    # Comments and replies

    def add_comment(self, user: User, post_id: int, content: str) -> Comment:
        """Add a comment to a post and notify the post's author."""
        text = _require_text(content, "Comment")
        post = self.get_post(post_id)

        comment = Comment(
            author_id=user.id,
            author_display_name=user.public_name,
            content=text,
        )
        post.comment_rows.append(comment)
        self._commit("add comment")
        logger.info("User %s commented on post %s", user.id, post_id)

        emit_notification(
            self.db,
            self.hub,
            recipient_id=post.author_id,
            sender=user,
            notification_type=NotificationType.COMMENT,
            community_id=post.community_id,
            post_id=post.id,
            content=text,
        )
        return comment

    def add_reply(self, user: User, post_id: int, comment_id: int, content: str) -> Comment:
        """Reply to a top-level comment and notify that comment's author."""
        text = _require_text(content, "Reply")
        post = self.get_post(post_id)
        comment = self._comment(post, comment_id)
        if comment.parent_id is not None:
            raise ValidationError("Replies can only be added to top-level comments")

        reply = Comment(
            post=post,
            author_id=user.id,
            author_display_name=user.public_name,
            content=text,
        )
        comment.reply_rows.append(reply)
        self._commit("add reply")
        logger.info("User %s replied to comment %s on post %s", user.id, comment_id, post_id)

        emit_notification(
            self.db,
            self.hub,
            recipient_id=comment.author_id,
            sender=user,
            notification_type=NotificationType.REPLY,
            community_id=post.community_id,
            post_id=post.id,
            content=text,
        )
        return reply

    def delete_comment(self, user: User, post_id: int, comment_id: int) -> None:
        """Delete a comment (with its replies) or a single reply; author only."""
        post = self.get_post(post_id)
        comment = self._comment(post, comment_id)
        if comment.author_id != user.id:
            raise AuthorizationError("Only the author can delete this comment")

        parent = None
        if comment.parent_id is not None:
            parent = self._comment(post, comment.parent_id)
        # Detaching from the post deletes the rows on flush (delete-orphan).
        for row in [comment, *comment.reply_rows]:
            post.comment_rows.remove(row)
        self._commit("delete comment")
        if parent is not None:
            self.db.expire(parent, ["reply_rows"])
        logger.info("User %s deleted comment %s on post %s", user.id, comment_id, post_id)

    # Helpers

    def _comment(self, post: Post, comment_id: int) -> Comment:
        comment = next((row for row in post.comment_rows if row.id == comment_id), None)
        if comment is None:
            raise NotFoundError("Comment not found")
        return comment

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise BackendError(f"Failed to {action}") from exc
