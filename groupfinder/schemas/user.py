"""
User Pydantic Schemas

Schemas:
- UserCreate: Registration data (email, password, username)
- UserResponse: The authenticated user's own account data
- UserPublicResponse: Public identity embedded in reviews, logs, rankings
- TokenResponse: Login/refresh result
"""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserBase(BaseModel):
    """Shared user fields."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["jane@example.com"],
    )

    username: str = Field(
        ...,
        min_length=3,
        max_length=50,
        description="Unique username (3-50 characters, alphanumeric and underscores)",
        examples=["janedoe"],
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        """Usernames start with a letter and contain only letters, digits and underscores."""
        if not re.match(r"^[a-zA-Z][a-zA-Z0-9_]*$", v):
            raise ValueError(
                "Username must start with a letter and contain only "
                "letters, numbers, and underscores"
            )
        return v.lower()


class UserCreate(UserBase):
    """
    Schema for user registration.

    Example request body:
    {
        "email": "jane@example.com",
        "username": "janedoe",
        "password": "SecurePass123",
        "display_name": "Jane Doe"
    }
    """

    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        description="Password (min 8 chars, must include uppercase and number)",
        examples=["SecurePass123"],
    )

    display_name: str | None = Field(
        default=None,
        max_length=255,
        description="Public display name",
        examples=["Jane Doe"],
    )

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one number")
        return v


class UserResponse(BaseModel):
    """
    Schema for the current user's account.

    SECURITY: Never includes the password hash.
    """

    id: int = Field(..., description="Unique user identifier", examples=[1])
    email: EmailStr = Field(..., description="User's email address")
    username: str = Field(..., description="Unique username")
    display_name: str | None = Field(default=None, description="Public display name")
    avatar_url: str | None = Field(default=None, description="URL to avatar image")
    bio: str | None = Field(default=None, description="User biography")
    is_active: bool = Field(..., description="Whether the account is active")
    role: str = Field(..., description="Authorization role (user, admin)")
    reputation_points: int = Field(..., description="Total reputation points")
    reputation_level: int = Field(..., description="Reputation level (0-5)")
    badges_count: int = Field(..., description="Number of badges held")
    created_at: datetime = Field(..., description="When the user registered")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "email": "jane@example.com",
                "username": "janedoe",
                "display_name": "Jane Doe",
                "avatar_url": None,
                "bio": None,
                "is_active": True,
                "role": "user",
                "reputation_points": 125,
                "reputation_level": 1,
                "badges_count": 2,
                "created_at": "2024-01-15T10:30:00Z",
            }
        },
    )


class UserPublicResponse(BaseModel):
    """Public identity of a user, safe to show to anyone."""

    id: int = Field(..., description="Unique user identifier")
    username: str = Field(..., description="Unique username")
    display_name: str | None = Field(default=None, description="Public display name")
    avatar_url: str | None = Field(default=None, description="URL to avatar image")

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Access token issued by login and refresh."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Always 'bearer'")
    expires_in: int = Field(..., description="Access token lifetime in seconds")
