"""User and token Pydantic schemas."""
import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_SPECIAL_CHARACTERS = "@$!%*#?&"
_PASSWORD_ALLOWED = re.compile(r"^[A-Za-z\d@$!%*#?&]+$", re.ASCII)


class UserCreate(BaseModel):
    """Schema for registering a user."""

    username: str = Field(
        ..., min_length=3, max_length=32, pattern=r"^[a-zA-Z0-9_.-]+$",
        description="Username (3-32 chars, alphanumeric + _ . -)"
    )
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ..., min_length=8, max_length=100, description="Password (8-100 characters)"
    )

    @field_validator("password")
    @classmethod
    def check_password_strength(cls, value: str) -> str:
        """Require a letter, a digit and a special character from @$!%*#?&."""
        if (
            not _PASSWORD_ALLOWED.match(value)
            or not any(c.isalpha() for c in value)
            or not any(c.isdigit() for c in value)
            or not any(c in PASSWORD_SPECIAL_CHARACTERS for c in value)
        ):
            raise ValueError(
                "Password must contain at least one letter, one number, "
                f"and one special character ({PASSWORD_SPECIAL_CHARACTERS})."
            )
        return value


class UserLogin(BaseModel):
    """Schema for user login."""

    username: str = Field(..., min_length=1, description="Username")
    password: str = Field(..., min_length=1, description="Password")


class RegisterResponse(BaseModel):
    """Public details of a newly registered user."""

    username: str
    email: str

    model_config = {"from_attributes": True}


class RefreshTokenRequest(BaseModel):
    """Schema for exchanging a refresh token."""

    refresh_token: str = Field(..., min_length=1, description="Refresh token from login")


class TokenResponse(BaseModel):
    """Schema for token response."""

    access_token: str
    refresh_token: str
    refresh_token_expires_at: datetime
    token_type: str = "bearer"

    model_config = {"from_attributes": True}


class CurrentUserResponse(BaseModel):
    """Identity of the authenticated caller."""

    user_id: str
    username: str
    email: str
