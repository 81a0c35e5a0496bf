"""Pydantic schemas for user and authentication API endpoints.

Field rules are checked by the account service so that a rule violation is
reported in the response envelope rather than as a 422.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from movie_catalog.schemas.common import ActionResponse


class UserCreate(BaseModel):
    """Schema for user registration."""

    username: str = Field(default="", description="Unique username (6-32 characters, no spaces)")
    password: str = Field(default="", description="Password (8-32 characters, mixed classes)")
    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    email: str = Field(default="", description="Email address")


class UserUpdate(BaseModel):
    """Schema for a partial account update; omitted fields stay unchanged."""

    username: str | None = Field(default=None, description="New username")
    password: str | None = Field(default=None, description="New password")
    first_name: str | None = Field(default=None, description="New first name")
    last_name: str | None = Field(default=None, description="New last name")
    email: str | None = Field(default=None, description="New email address")


class UserLogin(BaseModel):
    """Schema for user login request."""

    username: str = Field(default="", description="Username")
    password: str = Field(default="", description="Password")


class UserResponse(BaseModel):
    """Response schema for user data (excludes password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="User ID")
    username: str = Field(description="Username")
    first_name: str = Field(description="First name")
    last_name: str = Field(description="Last name")
    email: str = Field(description="Email address")
    created_at: datetime = Field(description="When the user was created")


class SessionUser(BaseModel):
    """The logged-in user's profile as carried by the auth context."""

    user_id: int = Field(description="User ID")
    username: str = Field(description="Username")
    first_name: str = Field(description="First name")
    last_name: str = Field(description="Last name")
    email: str = Field(description="Email address")


class CurrentUserResponse(BaseModel):
    """Whether a user is logged in, and who."""

    logged_in: bool = Field(description="Whether a valid token was sent")
    user: SessionUser | None = Field(default=None, description="Logged-in user")


class AccountResponse(ActionResponse):
    """Outcome of an account change."""

    user: UserResponse | None = Field(default=None, description="The account after the change")


class LoginResponse(ActionResponse):
    """Outcome of a login attempt."""

    access_token: str | None = Field(default=None, description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
