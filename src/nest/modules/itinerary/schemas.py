"""NEST Itinerary - Schemas."""

from typing import Literal

from pydantic import BaseModel, Field

ActivityCategory = Literal["food", "sightseeing", "rest", "travel", "kids"]

# HH:MM or HH:MM:SS
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$"


class DayResponse(BaseModel):
    id: str
    trip_id: str
    date: str
    index: int


class ActivityCreate(BaseModel):
    day_id: str
    title: str = Field(..., min_length=1, max_length=200)
    category: ActivityCategory = "sightseeing"
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    cost: float = Field(default=0, ge=0)
    notes: str | None = None


class ActivityUpdate(BaseModel):
    day_id: str | None = None
    title: str | None = Field(default=None, min_length=1, max_length=200)
    category: ActivityCategory | None = None
    start_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)
    cost: float | None = Field(default=None, ge=0)
    notes: str | None = None


class ActivityResponse(BaseModel):
    id: str
    day_id: str
    title: str
    category: ActivityCategory
    start_time: str | None = None
    end_time: str | None = None
    cost: float = 0
    notes: str | None = None
    created_at: str | None = None


class ItineraryResponse(BaseModel):
    """Days of a trip with all their activities."""

    trip_id: str
    days: list[DayResponse]
    activities: list[ActivityResponse]
