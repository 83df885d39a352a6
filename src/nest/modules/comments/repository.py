"""
NEST Comments - Repository.

Database operations for activity comments.
"""

from typing import Any

from nest.core.repository import BaseRepository


class CommentsRepository(BaseRepository[dict[str, Any]]):
    """Repository for activity_comments."""

    @property
    def table_name(self) -> str:
        return "activity_comments"

    async def list_for_activity(
        self,
        activity_id: str,
        page_size: int = 50,
        page_token: str | None = None,
    ) -> tuple[list[dict[str, Any]], str | None]:
        """One page of comments, oldest first, each with the author's profile email."""
        return await self.list_page(
            page_size=page_size,
            page_token=page_token,
            filters={"activity_id": activity_id},
            order_by="created_at",
            desc=False,
            columns="*, profiles(email)",
        )
