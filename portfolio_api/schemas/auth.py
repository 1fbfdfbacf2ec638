"""
Authentication schemas.
"""

import uuid
from datetime import datetime

from pydantic import EmailStr, Field

from portfolio_api.schemas.common import CamelModel


class UserCreate(CamelModel):
    """User registration request."""

    username: str = Field(..., min_length=3, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)


class UserLogin(CamelModel):
    """User login request."""

    username: str
    password: str


class UserSummary(CamelModel):
    """Public view of a user attached to owned content."""

    id: uuid.UUID
    username: str


class UserResponse(CamelModel):
    """User profile response. Never carries the password hash."""

    id: uuid.UUID
    username: str
    email: str
    created_at: datetime


class RegisterResponse(CamelModel):
    message: str = "User registered successfully."
    user_id: uuid.UUID
    user: UserResponse


class TokenResponse(CamelModel):
    """Authentication token response."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
