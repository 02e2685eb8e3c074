"""Shared API dependencies for authentication and the coordinators."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session, sessionmaker

from niche_communities.core.security import TokenError, decode_access_token
from niche_communities.db.session import get_db, get_session_factory
from niche_communities.models import User
from niche_communities.services import auth as auth_service
from niche_communities.services.interactions import InteractionCoordinator
from niche_communities.services.membership import MembershipCoordinator
from niche_communities.services.notifications import NotificationHub, get_notification_hub
from niche_communities.services.uploads import ImageUploader, get_image_uploader

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
HubDep = Annotated[NotificationHub, Depends(get_notification_hub)]
SessionFactoryDep = Annotated[sessionmaker[Session], Depends(get_session_factory)]
UploaderDep = Annotated[ImageUploader, Depends(get_image_uploader)]


@dataclass
class AuthContext:
    """Authenticated user together with the token that identified them."""

    user: User
    jti: str


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    db: SessionDep,
) -> AuthContext:
    """Resolve the bearer token into the signed-in user.

    Raises:
        HTTPException: If the token is invalid, revoked, or its user is gone.
    """
    try:
        user_id, jti = decode_access_token(credentials.credentials)
    except TokenError as err:
        raise _credentials_error() from err

    if auth_service.is_revoked(db, jti):
        raise _credentials_error("Session has ended")

    user = db.get(User, user_id)
    if user is None:
        raise _credentials_error("User not found")
    return AuthContext(user=user, jti=jti)


def get_current_user(auth: Annotated[AuthContext, Depends(get_auth_context)]) -> User:
    """Return the signed-in user."""
    return auth.user


def get_membership_coordinator(db: SessionDep, hub: HubDep) -> MembershipCoordinator:
    """Return a membership coordinator bound to the request session."""
    return MembershipCoordinator(db, hub)


def get_interaction_coordinator(db: SessionDep, hub: HubDep) -> InteractionCoordinator:
    """Return an interaction coordinator bound to the request session."""
    return InteractionCoordinator(db, hub)


AuthContextDep = Annotated[AuthContext, Depends(get_auth_context)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]
MembershipDep = Annotated[MembershipCoordinator, Depends(get_membership_coordinator)]
InteractionDep = Annotated[InteractionCoordinator, Depends(get_interaction_coordinator)]
