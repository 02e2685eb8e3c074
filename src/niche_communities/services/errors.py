"""Error taxonomy shared by the coordinators and the API layer."""

from __future__ import annotations

from fastapi import status


class ForumError(RuntimeError):
    """Base exception for failures surfaced to API callers.

    ``status_code`` is the HTTP status the API layer renders for the error and
    ``message`` is the short user-facing text.
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ForumError):
    """Input rejected before any write is attempted."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AuthorizationError(ForumError):
    """Caller is acting outside the role the operation requires."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to do that"


class NotFoundError(ForumError):
    """A referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ForumError):
    """The requested state already holds."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class BackendError(ForumError):
    """A durable write or a collaborator call failed; nothing is retried."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Something went wrong. Please try again."


class UploadError(BackendError):
    """The image hosting endpoint rejected or failed an upload."""

    default_message = "Failed to upload image"
