"""
NEST Comments - Service

Any trip member (viewers included) may read and write comments on the
trip's activities. Only the author may delete a comment.
"""

import logging

from nest.auth.schemas import User
from nest.exceptions import ForbiddenException, NotFoundException
from nest.modules.collaborators.service import ensure_member
from nest.modules.comments.repository import CommentsRepository
from nest.modules.comments.schemas import CommentCreate, CommentListResponse, CommentResponse
from nest.modules.itinerary.service import ItineraryService

logger = logging.getLogger(__name__)


class CommentsService:
    def __init__(self, client=None):
        self.itinerary = ItineraryService(client)
        self.comments = CommentsRepository(client)

    async def list_comments(
        self,
        trip_id: str,
        activity_id: str,
        user: User,
        page_size: int = 50,
        page_token: str | None = None,
    ) -> CommentListResponse:
        await ensure_member(self.itinerary.members, trip_id, user)
        await self.itinerary.get_trip_activity(trip_id, activity_id)

        rows, next_token = await self.comments.list_for_activity(activity_id, page_size, page_token)
        items = [CommentResponse(**row) for row in rows]
        return CommentListResponse(items=items, total=len(items), next_page_token=next_token)

    async def add_comment(self, trip_id: str, activity_id: str, data: CommentCreate, user: User) -> CommentResponse:
        await ensure_member(self.itinerary.members, trip_id, user)
        await self.itinerary.get_trip_activity(trip_id, activity_id)

        row = await self.comments.create(
            {"activity_id": activity_id, "user_id": user.id, "comment": data.comment.strip()}
        )
        logger.info(f"[comments] {user.id} commented on activity {activity_id}")
        return CommentResponse(**row, profiles={"email": user.email})

    async def delete_comment(self, trip_id: str, activity_id: str, comment_id: str, user: User) -> None:
        await ensure_member(self.itinerary.members, trip_id, user)

        comment = await self.comments.get_by_id(comment_id)
        if comment is None or comment.get("activity_id") != activity_id:
            raise NotFoundException("comment", comment_id)
        if comment.get("user_id") != user.id:
            raise ForbiddenException("Only the author can delete a comment")

        await self.comments.delete(comment_id)


def get_comments_service() -> CommentsService:
    return CommentsService()
