"""NEST Collaborators - Router.

REST API endpoints for trip membership.
"""

from fastapi import APIRouter, Depends, status

from nest.auth import get_current_user
from nest.auth.schemas import User
from nest.deps import require_collaborators
from nest.modules.collaborators.schemas import MemberInvite, MemberListResponse, MemberResponse
from nest.modules.collaborators.service import CollaboratorsService, get_collaborators_service

router = APIRouter(prefix="/trips/{trip_id}/members", tags=["Collaborators"], dependencies=[require_collaborators])


@router.get("", response_model=MemberListResponse)
async def list_members(
    trip_id: str,
    user: User = Depends(get_current_user),
    service: CollaboratorsService = Depends(get_collaborators_service),
) -> MemberListResponse:
    """List collaborators of a trip."""
    return await service.list_members(trip_id, user)


@router.post("", response_model=MemberResponse, status_code=status.HTTP_201_CREATED)
async def invite_member(
    trip_id: str,
    data: MemberInvite,
    user: User = Depends(get_current_user),
    service: CollaboratorsService = Depends(get_collaborators_service),
) -> MemberResponse:
    """Invite a registered user by email."""
    return await service.invite(trip_id, data, user)


@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    trip_id: str,
    member_id: str,
    user: User = Depends(get_current_user),
    service: CollaboratorsService = Depends(get_collaborators_service),
):
    """Remove a collaborator (owner only)."""
    await service.remove(trip_id, member_id, user)
    return None
