"""NEST Comments - Schemas."""

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    comment: str = Field(..., min_length=1, max_length=2000)


class CommentAuthor(BaseModel):
    email: str | None = None


class CommentResponse(BaseModel):
    id: str
    activity_id: str
    user_id: str
    comment: str
    created_at: str | None = None
    profiles: CommentAuthor | None = None


class CommentListResponse(BaseModel):
    items: list[CommentResponse]
    total: int
    next_page_token: str | None = None
