"""
NEST Trips - Service

Business logic for trips: membership-scoped listing, creation with
generated days, cascade deletion and cover uploads.
"""

import logging
from pathlib import Path
from uuid import uuid4

from nest.auth.schemas import User
from nest.core.supabase_client import get_supabase_client
from nest.exceptions import ValidationException
from nest.modules.collaborators.repository import ProfilesRepository, TripMembersRepository
from nest.modules.collaborators.service import EDITOR_ROLES, ensure_member
from nest.modules.comments.repository import CommentsRepository
from nest.modules.itinerary.repository import ActivitiesRepository, DaysRepository
from nest.modules.trips.repository import TripsRepository
from nest.modules.trips.schemas import TripCreate, TripListResponse, TripResponse, TripUpdate

logger = logging.getLogger(__name__)

COVER_BUCKET = "trip-covers"
COVER_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


class TripsService:
    """
    Manages trips.

    The creator becomes the trip's owner member. Every read and write is
    scoped by membership rather than by ``trips.user_id``.
    """

    def __init__(self, client=None):
        self.client = client or get_supabase_client()
        self.trips = TripsRepository(self.client)
        self.members = TripMembersRepository(self.client)
        self.profiles = ProfilesRepository(self.client)
        self.days = DaysRepository(self.client)
        self.activities = ActivitiesRepository(self.client)
        self.comments = CommentsRepository(self.client)

    async def list_trips(self, user: User) -> TripListResponse:
        """Trips the user is a member of, soonest first."""
        memberships = await self.members.list_for_user(user.id)
        rows = await self.trips.list_by_ids([m["trip_id"] for m in memberships])
        items = [TripResponse(**row) for row in rows]
        return TripListResponse(items=items, total=len(items))

    async def create_trip(self, data: TripCreate, user: User) -> TripResponse:
        await self.profiles.ensure_profile(user.id, user.email)

        trip = await self.trips.create(
            {
                "user_id": user.id,
                "name": data.name or f"Trip to {data.destination}",
                "destination": data.destination,
                "start_date": data.start_date.isoformat(),
                "end_date": data.end_date.isoformat(),
                "status": data.status,
                "cover_image": data.cover_image,
            }
        )
        await self.members.create({"trip_id": trip["id"], "user_id": user.id, "role": "owner"})
        days = await self.days.create_for_range(trip["id"], data.start_date, data.end_date)

        logger.info(f"[trips] {user.id} created trip {trip['id']} ({data.destination}, {len(days)} days)")
        return TripResponse(**trip)

    async def get_trip(self, trip_id: str, user: User) -> TripResponse:
        await ensure_member(self.members, trip_id, user)
        return TripResponse(**await self.trips.get_by_id_or_raise(trip_id))

    async def update_trip(self, trip_id: str, data: TripUpdate, user: User) -> TripResponse:
        await ensure_member(self.members, trip_id, user, roles=EDITOR_ROLES)

        changes = data.model_dump(exclude_unset=True)
        changes = {k: v for k, v in changes.items() if v is not None or k == "cover_image"}
        if not changes:
            return await self.get_trip(trip_id, user)

        return TripResponse(**await self.trips.update(trip_id, changes))

    async def delete_trip(self, trip_id: str, user: User) -> None:
        """Delete a trip with its days, activities, comments and memberships."""
        await ensure_member(self.members, trip_id, user, roles=("owner",))

        day_ids = [d["id"] for d in await self.days.list_for_trip(trip_id)]
        activity_ids = [a["id"] for a in await self.activities.list_for_days(day_ids)]

        await self.comments.delete_in("activity_id", activity_ids)
        await self.activities.delete_in("id", activity_ids)
        await self.days.delete_in("id", day_ids)
        await self.members.delete_in("trip_id", [trip_id])
        await self.trips.delete(trip_id)

        logger.info(
            f"[trips] {user.id} deleted trip {trip_id} "
            f"({len(day_ids)} days, {len(activity_ids)} activities)"
        )

    async def upload_cover(self, trip_id: str, filename: str, content: bytes, user: User) -> TripResponse:
        """Store an image in the covers bucket and point the trip at it."""
        await ensure_member(self.members, trip_id, user, roles=EDITOR_ROLES)

        ext = Path(filename).suffix.lower()
        if ext not in COVER_EXTENSIONS:
            raise ValidationException(
                f"Unsupported cover image type '{ext or filename}'",
                errors=[{"field": "file", "allowed": sorted(COVER_EXTENSIONS)}],
            )
        if not content:
            raise ValidationException("Empty file")

        bucket = self.client.storage.from_(COVER_BUCKET)
        path = f"{user.id}/{uuid4()}{ext}"
        bucket.upload(path, content)
        public_url = bucket.get_public_url(path)

        return TripResponse(**await self.trips.update(trip_id, {"cover_image": public_url}))


def get_trips_service() -> TripsService:
    return TripsService()
