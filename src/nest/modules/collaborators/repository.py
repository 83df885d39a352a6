"""
NEST Collaborators - Repository.

Database operations for trip memberships and profile lookups.
"""

from typing import Any

from nest.core.query_builder import NOT_FOUND_CODE
from nest.core.repository import BaseRepository
from nest.exceptions import BackendException


class TripMembersRepository(BaseRepository[dict[str, Any]]):
    """Repository for trip_members."""

    @property
    def table_name(self) -> str:
        return "trip_members"

    async def list_for_trip(self, trip_id: str) -> list[dict[str, Any]]:
        """Members of a trip with their profile email embedded."""
        return await self.list(filters={"trip_id": trip_id}, columns="*, profiles(email)")

    async def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        return await self.list(filters={"user_id": user_id}, columns="trip_id, role")

    async def get_membership(self, trip_id: str, user_id: str) -> dict[str, Any] | None:
        query = self.table.select("*").eq("trip_id", trip_id).eq("user_id", user_id).maybe_single()
        return self._data(query)


class ProfilesRepository(BaseRepository[dict[str, Any]]):
    """Repository for user profiles."""

    @property
    def table_name(self) -> str:
        return "profiles"

    async def find_by_email(self, email: str) -> dict[str, Any] | None:
        result = self._run(self.table.select("id, email").eq("email", email).single())
        if result.error is None:
            return result.data
        if result.error.code == NOT_FOUND_CODE:
            return None
        raise BackendException(result.error.code, result.error.message)

    async def ensure_profile(self, user_id: str, email: str | None) -> dict[str, Any]:
        """Return the profile for ``user_id``, creating it when missing."""
        profile = await self.get_by_id(user_id)
        if profile is not None:
            return profile
        return await self.create({"id": user_id, "email": email})
