"""NEST Trips Module - Trip lifecycle."""

from nest.modules.trips.router import router
from nest.modules.trips.service import TripsService
from nest.modules.trips.repository import TripsRepository

__all__ = ["router", "TripsService", "TripsRepository"]
