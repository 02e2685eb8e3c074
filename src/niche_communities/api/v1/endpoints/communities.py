"""Community-related endpoints for the Niche Communities API."""

from __future__ import annotations

from fastapi import APIRouter, Query, Response, status

from niche_communities.models import Community, Post
from niche_communities.schemas.community import (
    CommunityCreate,
    CommunityResponse,
    CommunityUpdate,
    MemberResponse,
    MembershipResponse,
)
from niche_communities.schemas.post import PostCreate, PostResponse

from ..dependencies import CurrentUserDep, InteractionDep, MembershipDep

router = APIRouter(prefix="/communities", tags=["communities"])


@router.get("/", response_model=list[CommunityResponse])
async def list_communities(
    membership: MembershipDep,
    q: str | None = Query(None, description="Search in names and descriptions"),
    category: str | None = Query(None, description="Filter by category"),
) -> list[Community]:
    """List communities, optionally searched and filtered."""
    return membership.list_communities(query=q, category=category)


@router.post("/", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
async def create_community(
    community_data: CommunityCreate,
    current_user: CurrentUserDep,
    membership: MembershipDep,
) -> Community:
    """Create a new community owned by the caller."""
    return membership.create_community(
        current_user,
        name=community_data.name,
        description=community_data.description,
        category=community_data.category,
        photo_url=community_data.photo_url,
    )


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(community_id: int, membership: MembershipDep) -> Community:
    """Get a specific community by ID."""
    return membership.get_community(community_id)


@router.patch("/{community_id}", response_model=CommunityResponse)
async def update_community(
    community_id: int,
    changes: CommunityUpdate,
    current_user: CurrentUserDep,
    membership: MembershipDep,
) -> Community:
    """Edit description, category or cover photo (creator only)."""
    return membership.update_community(
        current_user,
        community_id,
        description=changes.description,
        category=changes.category,
        photo_url=changes.photo_url,
    )


@router.delete(
    "/{community_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_community(
    community_id: int,
    current_user: CurrentUserDep,
    membership: MembershipDep,
) -> Response:
    """Delete a community and all of its posts (creator only)."""
    membership.delete_community(current_user, community_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{community_id}/members", response_model=list[MemberResponse])
async def list_members(community_id: int, membership: MembershipDep) -> list[MemberResponse]:
    """List members with their display details."""
    return membership.list_members(community_id)


@router.post(
    "/{community_id}/join",
    response_model=MembershipResponse,
    status_code=status.HTTP_201_CREATED,
)
async def join_community(
    community_id: int,
    current_user: CurrentUserDep,
    membership: MembershipDep,
) -> MembershipResponse:
    """Join a community."""
    return membership.join(current_user, community_id)


@router.delete("/{community_id}/leave", response_model=MembershipResponse)
async def leave_community(
    community_id: int,
    current_user: CurrentUserDep,
    membership: MembershipDep,
) -> MembershipResponse:
    """Leave a community."""
    return membership.leave(current_user, community_id)


@router.delete("/{community_id}/members/{user_id}", response_model=MembershipResponse)
async def remove_member(
    community_id: int,
    user_id: int,
    current_user: CurrentUserDep,
    membership: MembershipDep,
) -> MembershipResponse:
    """Remove another member (creator only)."""
    return membership.remove_member(current_user, community_id, user_id)


@router.get("/{community_id}/posts", response_model=list[PostResponse])
async def get_community_posts(community_id: int, interactions: InteractionDep) -> list[Post]:
    """Get posts from a specific community, newest first."""
    return interactions.list_posts(community_id)


@router.post(
    "/{community_id}/posts",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_post(
    community_id: int,
    post_data: PostCreate,
    current_user: CurrentUserDep,
    interactions: InteractionDep,
) -> Post:
    """Create a post in a community the caller belongs to."""
    return interactions.create_post(
        current_user,
        community_id,
        content=post_data.content,
        media_url=post_data.media_url,
    )
