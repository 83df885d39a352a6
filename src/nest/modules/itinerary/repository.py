"""
NEST Itinerary - Repository.

Database operations for trip days and their activities.
"""

from datetime import date, timedelta
from typing import Any

from nest.core.repository import BaseRepository


class DaysRepository(BaseRepository[dict[str, Any]]):
    """Repository for days (one row per calendar date of a trip)."""

    @property
    def table_name(self) -> str:
        return "days"

    async def list_for_trip(self, trip_id: str) -> list[dict[str, Any]]:
        return await self.list(filters={"trip_id": trip_id}, order_by="index")

    async def create_for_range(self, trip_id: str, start: date, end: date) -> list[dict[str, Any]]:
        """Insert one day per date from ``start`` to ``end`` inclusive."""
        rows = []
        current = start
        while current <= end:
            rows.append({"trip_id": trip_id, "date": current.isoformat(), "index": len(rows)})
            current += timedelta(days=1)
        return await self.create_many(rows)


class ActivitiesRepository(BaseRepository[dict[str, Any]]):
    """Repository for activities scheduled on a day."""

    @property
    def table_name(self) -> str:
        return "activities"

    async def list_for_days(self, day_ids: list[str]) -> list[dict[str, Any]]:
        return await self.list_in("day_id", day_ids, order_by="start_time")
