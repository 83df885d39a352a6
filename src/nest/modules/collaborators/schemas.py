"""NEST Collaborators - Schemas."""

from typing import Literal

from pydantic import BaseModel, Field

MemberRole = Literal["owner", "editor", "viewer"]


class MemberInvite(BaseModel):
    """Invite an existing user to a trip by email."""

    email: str = Field(..., min_length=3, max_length=320)
    role: Literal["editor", "viewer"] = "viewer"


class MemberProfile(BaseModel):
    email: str | None = None


class MemberResponse(BaseModel):
    id: str
    trip_id: str
    user_id: str
    role: MemberRole
    created_at: str | None = None
    profiles: MemberProfile | None = None


class MemberListResponse(BaseModel):
    items: list[MemberResponse]
    total: int
