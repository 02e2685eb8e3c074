"""Account, profile and session helpers."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from niche_communities.core import security
from niche_communities.models import RevokedToken, User

from .errors import AuthorizationError, BackendError, ConflictError

logger = logging.getLogger(__name__)

__all__ = [
    "create_account",
    "authenticate",
    "update_profile",
    "sign_out",
    "is_revoked",
]

_PROFILE_FIELDS = ("display_name", "photo_url", "bio", "location", "website")


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Return the account registered under ``email``, if any."""
    return (
        db.query(User)
        .filter(func.lower(User.email) == _normalize_email(email))
        .first()
    )


def create_account(db: Session, *, email: str, password: str, display_name: str) -> User:
    """Register a new account with an empty profile and no communities."""
    if get_user_by_email(db, email) is not None:
        raise ConflictError("An account with this e-mail already exists")

    user = User(
        email=_normalize_email(email),
        password_hash=security.hash_password(password),
        display_name=display_name.strip(),
        photo_url=None,
        bio="",
        location="",
        website="",
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("An account with this e-mail already exists") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to create account: %s", exc)
        raise BackendError("Failed to create account") from exc

    db.refresh(user)
    logger.info("Created account %s", user.id)
    return user


def authenticate(db: Session, *, email: str, password: str) -> User:
    """Return the account matching the credentials or raise :class:`AuthorizationError`."""
    user = get_user_by_email(db, email)
    if user is None or not security.verify_password(password, user.password_hash):
        raise AuthorizationError("Invalid e-mail or password")
    return user


def update_profile(db: Session, user: User, changes: dict[str, str | None]) -> User:
    """Apply partial profile changes.

    Content already posted keeps the display fields captured when it was
    written.
    """
    for key, value in changes.items():
        if key not in _PROFILE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
        if key == "photo_url":
            setattr(user, key, value or None)
        elif value is not None:
            setattr(user, key, value)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to update profile of user %s: %s", user.id, exc)
        raise BackendError("Failed to update profile") from exc

    db.refresh(user)
    return user


def sign_out(db: Session, *, user_id: int, jti: str) -> None:
    """Revoke the access token identified by ``jti``."""
    if db.get(RevokedToken, jti) is not None:
        return
    db.add(RevokedToken(jti=jti, user_id=user_id))
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to revoke token for user %s: %s", user_id, exc)
        raise BackendError("Failed to sign out") from exc
    logger.info("User %s signed out", user_id)


def is_revoked(db: Session, jti: str) -> bool:
    """Return True if the token was revoked by signing out."""
    return db.get(RevokedToken, jti) is not None
