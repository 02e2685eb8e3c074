"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Public profile returned by the API."""

    id: int
    display_name: str
    photo_url: str | None
    bio: str
    location: str
    website: str
    communities: list[int] = Field(default_factory=list, description="Joined community ids")

    model_config = ConfigDict(from_attributes=True)


class PrivateUserResponse(UserResponse):
    """Profile of the signed-in user, including their e-mail address."""

    email: str


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    display_name: str | None = Field(None, min_length=1, max_length=80)
    photo_url: str | None = None
    bio: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=120)
    website: str | None = Field(None, max_length=300)
