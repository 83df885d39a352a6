"""NEST Collaborators Module - Trip membership and invitations."""

from nest.modules.collaborators.router import router
from nest.modules.collaborators.service import CollaboratorsService
from nest.modules.collaborators.repository import ProfilesRepository, TripMembersRepository

__all__ = ["router", "CollaboratorsService", "ProfilesRepository", "TripMembersRepository"]
