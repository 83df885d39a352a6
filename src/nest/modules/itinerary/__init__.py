"""NEST Itinerary Module - Days and activities."""

from nest.modules.itinerary.router import router
from nest.modules.itinerary.service import ItineraryService
from nest.modules.itinerary.repository import ActivitiesRepository, DaysRepository

__all__ = ["router", "ItineraryService", "ActivitiesRepository", "DaysRepository"]
