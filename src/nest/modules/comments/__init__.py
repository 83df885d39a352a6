"""NEST Comments Module - Discussion on activities."""

from nest.modules.comments.router import router
from nest.modules.comments.service import CommentsService
from nest.modules.comments.repository import CommentsRepository

__all__ = ["router", "CommentsService", "CommentsRepository"]
