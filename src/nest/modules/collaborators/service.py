"""
NEST Collaborators - Service

Trip membership: who can see a trip and who can change it.
"""

import logging
from typing import Any

from nest.auth.schemas import User
from nest.exceptions import ConflictException, ForbiddenException, NotFoundException, ValidationException
from nest.modules.collaborators.repository import ProfilesRepository, TripMembersRepository
from nest.modules.collaborators.schemas import MemberInvite, MemberListResponse, MemberResponse

logger = logging.getLogger(__name__)

EDITOR_ROLES = ("owner", "editor")


async def ensure_member(
    members: TripMembersRepository,
    trip_id: str,
    user: User,
    roles: tuple[str, ...] | None = None,
) -> dict[str, Any]:
    """
    Return the caller's membership row for a trip.

    Non-members get a 404 so trip ids don't leak. Members without one of
    ``roles`` get a 403.
    """
    membership = await members.get_membership(trip_id, user.id)
    if membership is None:
        raise NotFoundException("trip", trip_id)
    if roles and membership.get("role") not in roles:
        raise ForbiddenException(required_role=", ".join(roles))
    return membership


class CollaboratorsService:
    """Manages trip members."""

    def __init__(self, client=None):
        self.members = TripMembersRepository(client)
        self.profiles = ProfilesRepository(client)

    async def list_members(self, trip_id: str, user: User) -> MemberListResponse:
        await ensure_member(self.members, trip_id, user)
        rows = await self.members.list_for_trip(trip_id)
        items = [MemberResponse(**row) for row in rows]
        return MemberListResponse(items=items, total=len(items))

    async def invite(self, trip_id: str, data: MemberInvite, user: User) -> MemberResponse:
        """Add an existing user (looked up by email) to the trip."""
        await ensure_member(self.members, trip_id, user, roles=("owner",))

        profile = await self.profiles.find_by_email(data.email.strip())
        if profile is None:
            raise NotFoundException("profile", data.email)

        if await self.members.get_membership(trip_id, profile["id"]) is not None:
            raise ConflictException(
                "User is already a member.",
                details={"trip_id": trip_id, "user_id": profile["id"]},
            )

        row = await self.members.create({"trip_id": trip_id, "user_id": profile["id"], "role": data.role})
        logger.info(f"[collaborators] {user.id} added {profile['id']} to trip {trip_id} as {data.role}")
        return MemberResponse(**row, profiles={"email": profile.get("email")})

    async def remove(self, trip_id: str, member_id: str, user: User) -> None:
        await ensure_member(self.members, trip_id, user, roles=("owner",))

        member = await self.members.get_by_id(member_id)
        if member is None or member.get("trip_id") != trip_id:
            raise NotFoundException("member", member_id)
        if member.get("role") == "owner":
            raise ValidationException("The trip owner cannot be removed.")

        await self.members.delete(member_id)
        logger.info(f"[collaborators] {user.id} removed member {member_id} from trip {trip_id}")


def get_collaborators_service() -> CollaboratorsService:
    return CollaboratorsService()
