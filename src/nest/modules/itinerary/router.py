"""NEST Itinerary - Router.

REST API endpoints for a trip's days and activities.
"""

from fastapi import APIRouter, Depends, status

from nest.auth import get_current_user
from nest.auth.schemas import User
from nest.deps import require_itinerary
from nest.modules.itinerary.schemas import ActivityCreate, ActivityResponse, ActivityUpdate, ItineraryResponse
from nest.modules.itinerary.service import ItineraryService, get_itinerary_service

router = APIRouter(prefix="/trips/{trip_id}", tags=["Itinerary"], dependencies=[require_itinerary])


@router.get("/itinerary", response_model=ItineraryResponse)
async def get_itinerary(
    trip_id: str,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    """Days (by index) and activities (by start time) of a trip."""
    return await service.get_itinerary(trip_id, user)


@router.post("/activities", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def create_activity(
    trip_id: str,
    data: ActivityCreate,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ActivityResponse:
    return await service.create_activity(trip_id, data, user)


@router.patch("/activities/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    trip_id: str,
    activity_id: str,
    data: ActivityUpdate,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ActivityResponse:
    return await service.update_activity(trip_id, activity_id, data, user)


@router.delete("/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    trip_id: str,
    activity_id: str,
    user: User = Depends(get_current_user),
    service: ItineraryService = Depends(get_itinerary_service),
):
    await service.delete_activity(trip_id, activity_id, user)
    return None
