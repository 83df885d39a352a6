"""NEST Comments - Router.

REST API endpoints for activity comments.
"""

from fastapi import APIRouter, Depends, Query, status

from nest.auth import get_current_user
from nest.auth.schemas import User
from nest.deps import require_comments
from nest.modules.comments.schemas import CommentCreate, CommentListResponse, CommentResponse
from nest.modules.comments.service import CommentsService, get_comments_service

router = APIRouter(
    prefix="/trips/{trip_id}/activities/{activity_id}/comments",
    tags=["Comments"],
    dependencies=[require_comments],
)


@router.get("", response_model=CommentListResponse)
async def list_comments(
    trip_id: str,
    activity_id: str,
    page_size: int = Query(50, ge=1, le=100),
    page_token: str | None = Query(None),
    user: User = Depends(get_current_user),
    service: CommentsService = Depends(get_comments_service),
) -> CommentListResponse:
    """Comments oldest first, one page at a time."""
    return await service.list_comments(trip_id, activity_id, user, page_size, page_token)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    trip_id: str,
    activity_id: str,
    data: CommentCreate,
    user: User = Depends(get_current_user),
    service: CommentsService = Depends(get_comments_service),
) -> CommentResponse:
    return await service.add_comment(trip_id, activity_id, data, user)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    trip_id: str,
    activity_id: str,
    comment_id: str,
    user: User = Depends(get_current_user),
    service: CommentsService = Depends(get_comments_service),
):
    await service.delete_comment(trip_id, activity_id, comment_id, user)
    return None
