"""Image upload schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    """Public URL of an uploaded image."""

    url: str
