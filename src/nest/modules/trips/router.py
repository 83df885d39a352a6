"""NEST Trips - Router.

REST API endpoints for trip management.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from nest.auth import get_current_user
from nest.auth.schemas import User
from nest.deps import require_media, require_trips
from nest.exceptions import ValidationException
from nest.modules.trips.schemas import TripCreate, TripListResponse, TripResponse, TripUpdate
from nest.modules.trips.service import TripsService, get_trips_service

router = APIRouter(prefix="/trips", tags=["Trips"], dependencies=[require_trips])


@router.get("", response_model=TripListResponse)
async def list_trips(
    user: User = Depends(get_current_user),
    service: TripsService = Depends(get_trips_service),
) -> TripListResponse:
    """List trips the current user is a member of."""
    return await service.list_trips(user)


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    data: TripCreate,
    user: User = Depends(get_current_user),
    service: TripsService = Depends(get_trips_service),
) -> TripResponse:
    """Create a trip; the caller becomes its owner."""
    return await service.create_trip(data, user)


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: str,
    user: User = Depends(get_current_user),
    service: TripsService = Depends(get_trips_service),
) -> TripResponse:
    return await service.get_trip(trip_id, user)


@router.patch("/{trip_id}", response_model=TripResponse)
async def update_trip(
    trip_id: str,
    data: TripUpdate,
    user: User = Depends(get_current_user),
    service: TripsService = Depends(get_trips_service),
) -> TripResponse:
    return await service.update_trip(trip_id, data, user)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_trip(
    trip_id: str,
    user: User = Depends(get_current_user),
    service: TripsService = Depends(get_trips_service),
):
    """Delete a trip and everything under it (owner only)."""
    await service.delete_trip(trip_id, user)
    return None


@router.post("/{trip_id}/cover", response_model=TripResponse, dependencies=[require_media])
async def upload_cover(
    trip_id: str,
    file: UploadFile = File(..., description="Cover image (jpg, png, webp, gif)"),
    user: User = Depends(get_current_user),
    service: TripsService = Depends(get_trips_service),
) -> TripResponse:
    """Upload a cover image for the trip."""
    if not file.filename:
        raise ValidationException("Filename is required")

    content = await file.read()
    return await service.upload_cover(trip_id, file.filename, content, user)
