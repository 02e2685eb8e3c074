"""Profile endpoints."""

from fastapi import APIRouter, HTTPException, status

from niche_communities.models import User
from niche_communities.schemas.user import PrivateUserResponse, ProfileUpdate, UserResponse
from niche_communities.services import auth as auth_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=PrivateUserResponse)
async def get_me(current_user: CurrentUserDep) -> User:
    """Return the signed-in user's profile and joined communities."""
    return current_user


@router.patch("/me", response_model=PrivateUserResponse)
async def update_me(
    changes: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> User:
    """Update profile fields; use the uploads endpoint first for a new photo."""
    return auth_service.update_profile(
        db, current_user, changes.model_dump(exclude_unset=True)
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: SessionDep) -> User:
    """Return another user's public profile."""
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user
