"""Community-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    category: str = ""
    photo_url: str | None = None


class CommunityUpdate(BaseModel):
    """Creator-only edits; omitted fields are left unchanged."""

    description: str | None = None
    category: str | None = None
    photo_url: str | None = None


class CommunityResponse(BaseModel):
    """Schema for community information returned by the API."""

    id: int
    name: str
    description: str
    category: str
    photo_url: str | None
    created_by: int
    created_at: datetime
    members: list[int]
    member_count: int

    @model_validator(mode="before")
    @classmethod
    def _count_members(cls, data: object) -> object:
        if not isinstance(data, dict):
            extracted: dict[str, object | None] = {}
            for field_name in cls.model_fields:
                extracted[field_name] = getattr(data, field_name, None)
            data = extracted

        if data.get("member_count") is None:
            data["member_count"] = len(data.get("members") or [])
        return data

    model_config = ConfigDict(from_attributes=True)


class MembershipResponse(BaseModel):
    """Membership view returned after join and leave."""

    community_id: int
    user_id: int
    is_member: bool
    members: list[int]
    member_count: int


class MemberResponse(BaseModel):
    """Member details listed on a community page."""

    user_id: int
    display_name: str
    photo_url: str | None
    role: str
    joined_at: datetime
