"""
NEST Trips - Repository.

Database operations for trips.
"""

from typing import Any

from nest.core.repository import BaseRepository


class TripsRepository(BaseRepository[dict[str, Any]]):
    """Repository for trips."""

    @property
    def table_name(self) -> str:
        return "trips"

    async def list_by_ids(self, trip_ids: list[str]) -> list[dict[str, Any]]:
        """Trips in ``trip_ids``, soonest first."""
        return await self.list_in("id", trip_ids, order_by="start_date")
