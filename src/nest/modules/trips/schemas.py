"""NEST Trips - Schemas."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, model_validator

TripStatus = Literal["planning", "confirmed", "completed"]


class TripCreate(BaseModel):
    """New trip. Days are generated for every date in the range."""

    name: str | None = Field(default=None, max_length=200)
    destination: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    status: TripStatus = "planning"
    cover_image: str | None = None

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TripUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    destination: str | None = Field(default=None, min_length=1, max_length=200)
    status: TripStatus | None = None
    cover_image: str | None = None


class TripResponse(BaseModel):
    id: str
    user_id: str
    name: str
    destination: str
    start_date: str
    end_date: str
    status: TripStatus
    cover_image: str | None = None
    created_at: str | None = None


class TripListResponse(BaseModel):
    items: list[TripResponse]
    total: int
