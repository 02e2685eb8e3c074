"""Post interaction endpoints: reactions, comments and replies."""

from fastapi import APIRouter, Response, status

from niche_communities.models import Comment, Post
from niche_communities.schemas.post import (
    CommentCreate,
    CommentResponse,
    PostResponse,
    ReactionRequest,
    ReactionStateResponse,
)

from ..dependencies import CurrentUserDep, InteractionDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, interactions: InteractionDep) -> Post:
    """Get a post with its reactions, comments and replies."""
    return interactions.get_post(post_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_post(
    post_id: int,
    current_user: CurrentUserDep,
    interactions: InteractionDep,
) -> Response:
    """Delete a post (author only)."""
    interactions.delete_post(current_user, post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/reactions", response_model=ReactionStateResponse)
async def toggle_reaction(
    post_id: int,
    reaction: ReactionRequest,
    current_user: CurrentUserDep,
    interactions: InteractionDep,
) -> ReactionStateResponse:
    """Toggle the caller's reaction of the given kind."""
    active, reactions = interactions.react(current_user, post_id, reaction.kind)
    return ReactionStateResponse(
        post_id=post_id,
        kind=reaction.kind,
        active=active,
        reactions=reactions,
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: int,
    comment: CommentCreate,
    current_user: CurrentUserDep,
    interactions: InteractionDep,
) -> Comment:
    """Comment on a post."""
    return interactions.add_comment(current_user, post_id, comment.content)


@router.post(
    "/{post_id}/comments/{comment_id}/replies",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_reply(
    post_id: int,
    comment_id: int,
    reply: CommentCreate,
    current_user: CurrentUserDep,
    interactions: InteractionDep,
) -> Comment:
    """Reply to a comment."""
    return interactions.add_reply(current_user, post_id, comment_id, reply.content)


@router.delete(
    "/{post_id}/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_comment(
    post_id: int,
    comment_id: int,
    current_user: CurrentUserDep,
    interactions: InteractionDep,
) -> Response:
    """Delete a comment or reply (author only)."""
    interactions.delete_comment(current_user, post_id, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
