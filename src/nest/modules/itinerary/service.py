"""
NEST Itinerary - Service

Days and activities of a trip. Every call checks trip membership first;
writes need the owner or editor role.
"""

import logging
from typing import Any

from nest.auth.schemas import User
from nest.exceptions import NotFoundException, ValidationException
from nest.modules.collaborators.repository import TripMembersRepository
from nest.modules.collaborators.service import EDITOR_ROLES, ensure_member
from nest.modules.itinerary.repository import ActivitiesRepository, DaysRepository
from nest.modules.itinerary.schemas import (
    ActivityCreate,
    ActivityResponse,
    ActivityUpdate,
    DayResponse,
    ItineraryResponse,
)

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = ("start_time", "end_time", "notes")


class ItineraryService:
    """Reads and edits the itinerary of a trip."""

    def __init__(self, client=None):
        self.members = TripMembersRepository(client)
        self.days = DaysRepository(client)
        self.activities = ActivitiesRepository(client)

    async def _day_ids(self, trip_id: str) -> list[str]:
        return [day["id"] for day in await self.days.list_for_trip(trip_id)]

    async def get_trip_activity(self, trip_id: str, activity_id: str) -> dict[str, Any]:
        """Activity row, only if it sits on one of the trip's days."""
        activity = await self.activities.get_by_id(activity_id)
        if activity is None or activity.get("day_id") not in await self._day_ids(trip_id):
            raise NotFoundException("activity", activity_id)
        return activity

    async def get_itinerary(self, trip_id: str, user: User) -> ItineraryResponse:
        await ensure_member(self.members, trip_id, user)

        days = await self.days.list_for_trip(trip_id)
        activities = await self.activities.list_for_days([d["id"] for d in days])
        return ItineraryResponse(
            trip_id=trip_id,
            days=[DayResponse(**d) for d in days],
            activities=[ActivityResponse(**a) for a in activities],
        )

    async def create_activity(self, trip_id: str, data: ActivityCreate, user: User) -> ActivityResponse:
        await ensure_member(self.members, trip_id, user, roles=EDITOR_ROLES)

        if data.day_id not in await self._day_ids(trip_id):
            raise ValidationException(
                "Day does not belong to this trip.",
                errors=[{"field": "day_id", "value": data.day_id}],
            )

        row = await self.activities.create(data.model_dump())
        logger.info(f"[itinerary] {user.id} added activity {row['id']} to trip {trip_id}")
        return ActivityResponse(**row)

    async def update_activity(
        self,
        trip_id: str,
        activity_id: str,
        data: ActivityUpdate,
        user: User,
    ) -> ActivityResponse:
        await ensure_member(self.members, trip_id, user, roles=EDITOR_ROLES)
        await self.get_trip_activity(trip_id, activity_id)

        # Only the optional fields may be cleared with an explicit null.
        changes = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in NULLABLE_FIELDS
        }
        if "day_id" in changes and changes["day_id"] not in await self._day_ids(trip_id):
            raise ValidationException(
                "Day does not belong to this trip.",
                errors=[{"field": "day_id", "value": changes["day_id"]}],
            )
        if not changes:
            return ActivityResponse(**await self.activities.get_by_id_or_raise(activity_id))

        return ActivityResponse(**await self.activities.update(activity_id, changes))

    async def delete_activity(self, trip_id: str, activity_id: str, user: User) -> None:
        await ensure_member(self.members, trip_id, user, roles=EDITOR_ROLES)
        await self.get_trip_activity(trip_id, activity_id)
        await self.activities.delete(activity_id)
        logger.info(f"[itinerary] {user.id} deleted activity {activity_id} from trip {trip_id}")


def get_itinerary_service() -> ItineraryService:
    return ItineraryService()
