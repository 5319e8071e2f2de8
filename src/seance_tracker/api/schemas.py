"""Pydantic request/response models for the API.

Goal and session payload fields are intentionally loose: the services
validate them field by field so clients get one precise message for the
first problem found.
"""

from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field


# Auth

class RegisterRequest(BaseModel):
    """Request model for user registration."""

    email: EmailStr
    password: str = Field(min_length=8, description="Password must be at least 8 characters")
    display_name: Optional[str] = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    """Request model for user login."""

    email: str
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    """Response model for authentication tokens."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RegisterResponse(TokenResponse):
    message: str = "User registered"
    userId: str


class UserResponse(BaseModel):
    """Response model for user information."""

    id: str
    email: str
    display_name: Optional[str]
    created_at: Optional[str]
    last_login_at: Optional[str] = None


# Sessions

class SessionCreateRequest(BaseModel):
    """Request model for logging a session.

    type: 1 (Running), 2 (Cycling), 3 (Strength); duration in minutes;
    distance in meters.
    """

    type: Any = None
    duration: Any = None
    distance: Any = None
    calories: Any = None
    date: Any = None


class SessionUpdateRequest(SessionCreateRequest):
    """Partial update; only the supplied fields change."""


# Goals

class GoalCreateRequest(BaseModel):
    """Request model for creating a goal.

    seance_type: 1 (Running), 2 (Cycling), 3 (Strength)
    goal_type: 1 (Distance), 2 (Duration), 3 (Calories)
    """

    seance_type: Any = None
    goal_type: Any = None
    goal_value: Any = None
    start_date: Any = None
    end_date: Any = None
