"""
NEST Auth - Schemas.

Pydantic models for mock sessions and the authenticated API user.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field


class MockUser(BaseModel):
    """Identity carried by a mock session (mirrors Supabase's auth user)."""

    id: str
    email: str | None = None
    aud: str = "authenticated"
    role: Literal["authenticated", "anonymous"] = "authenticated"
    created_at: str | None = None
    is_anonymous: bool = False
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class MockSession(BaseModel):
    """Active session (what the snapshot file persists)."""

    access_token: str
    token_type: str = "bearer"
    user: MockUser
    expires_in: int = 3600
    refresh_token: str


class AuthResponse(BaseModel):
    """Result of a sign-in style call: user and session, or an error."""

    user: MockUser | None = None
    session: MockSession | None = None
    error: dict[str, Any] | None = None


class User(BaseModel):
    """Authenticated user as seen by the HTTP layer."""

    id: str
    email: str | None = None
    is_anonymous: bool = False
    access_token: str | None = None
