"""Authentication request and response schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from niche_communities.core.settings import settings

from .user import PrivateUserResponse


class SignupRequest(BaseModel):
    """Schema for creating a new account."""

    email: EmailStr
    password: str = Field(..., max_length=128)
    password_confirm: str = Field(..., description="Must repeat the password exactly")
    display_name: str = Field(..., min_length=1, max_length=80)

    @field_validator("password")
    @classmethod
    def _password_long_enough(cls, value: str) -> str:
        if len(value) < settings.min_password_length:
            raise ValueError(
                f"Password must be at least {settings.min_password_length} characters"
            )
        return value

    @model_validator(mode="after")
    def _passwords_match(self) -> "SignupRequest":
        if self.password != self.password_confirm:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    """Schema for e-mail and password login."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Access token issued after signup or login."""

    access_token: str
    token_type: str = "bearer"
    user: PrivateUserResponse
