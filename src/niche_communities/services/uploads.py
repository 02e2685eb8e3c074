"""Client for the image hosting endpoint.

Uploads are unsigned form posts (``file`` plus ``upload_preset``) answered
with a JSON body whose ``secure_url`` is the public address of the image.
Size and type are checked before any network call and nothing is retried.
"""

from __future__ import annotations

import logging

import httpx

from niche_communities.core.settings import settings

from .errors import UploadError, ValidationError

logger = logging.getLogger(__name__)

HTTP_OK = 200


def validate_image(content_type: str | None, size: int) -> None:
    """Reject non-images and files over the configured size limit."""
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError("Please select an image file")
    if size > settings.upload_max_bytes:
        limit_mb = settings.upload_max_bytes // (1024 * 1024)
        raise ValidationError(f"Image size should be less than {limit_mb}MB")
    if size == 0:
        raise ValidationError("Image file is empty")


class ImageUploader:
    """Uploads images and returns their public URL."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client
        self._owns_client = client is None

    async def upload(self, data: bytes, *, filename: str, content_type: str | None) -> str:
        """Upload ``data`` and return the hosted image URL.

        Raises:
            ValidationError: If the file is not an image or is too large.
            UploadError: If the endpoint fails or answers without a URL.
        """
        validate_image(content_type, len(data))

        client = self._client or httpx.AsyncClient(timeout=settings.upload_timeout_seconds)
        try:
            response = await client.post(
                settings.upload_url,
                data={
                    "upload_preset": settings.upload_preset,
                    "cloud_name": settings.upload_cloud_name,
                },
                files={"file": (filename, data, content_type)},
            )
        except httpx.HTTPError as exc:
            logger.warning("Image upload failed: %s", exc)
            raise UploadError() from exc
        finally:
            if self._owns_client:
                await client.aclose()

        if response.status_code != HTTP_OK:
            raise UploadError(f"Failed to upload image: {_error_message(response)}")

        try:
            url = response.json().get("secure_url")
        except ValueError as exc:
            raise UploadError("Image host returned an invalid response") from exc
        if not url:
            raise UploadError("Image host returned no URL")

        logger.info("Uploaded image %s (%d bytes)", filename, len(data))
        return str(url)


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase or str(response.status_code)
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.reason_phrase or str(response.status_code)


def get_image_uploader() -> ImageUploader:
    """Return an uploader using a short-lived HTTP client per upload."""
    return ImageUploader()
