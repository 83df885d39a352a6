"""
Tests for the trip, itinerary, collaborator and comment services
running against the in-memory client.
"""

from datetime import date

import pytest

from nest.auth.schemas import User
from nest.config import MockSettings, Settings
from nest.core.mock_client import MockClient
from nest.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from nest.modules.collaborators.schemas import MemberInvite
from nest.modules.collaborators.service import CollaboratorsService
from nest.modules.comments.schemas import CommentCreate
from nest.modules.comments.service import CommentsService
from nest.modules.itinerary.schemas import ActivityCreate, ActivityUpdate
from nest.modules.itinerary.service import ItineraryService
from nest.modules.trips.schemas import TripCreate, TripUpdate
from nest.modules.trips.service import TripsService


DEMO = User(id="user-123-mock", email="demo@nest.app")


@pytest.fixture
def client():
    return MockClient(settings=Settings(mock=MockSettings(session_file="")))


@pytest.fixture
def trips(client):
    return TripsService(client)


@pytest.fixture
def itinerary(client):
    return ItineraryService(client)


@pytest.fixture
def collaborators(client):
    return CollaboratorsService(client)


@pytest.fixture
def comments(client):
    return CommentsService(client)


@pytest.fixture
def grandma(client):
    """Second registered user."""
    client.table("profiles").insert({"id": "user-grandma", "email": "grandma@nest.app"}).execute()
    return User(id="user-grandma", email="grandma@nest.app")


def paris() -> TripCreate:
    return TripCreate(destination="Paris", start_date=date(2026, 7, 1), end_date=date(2026, 7, 3))


class TestTrips:
    """Trip lifecycle."""

    @pytest.mark.asyncio
    async def test_create_generates_days_and_owner(self, trips, client):
        trip = await trips.create_trip(paris(), DEMO)

        assert trip.name == "Trip to Paris"
        assert trip.start_date == "2026-07-01"

        days = client.table("days").select("*").eq("trip_id", trip.id).order("index").execute().data
        assert [d["date"] for d in days] == ["2026-07-01", "2026-07-02", "2026-07-03"]
        assert [d["index"] for d in days] == [0, 1, 2]

        member = client.table("trip_members").select("*").eq("trip_id", trip.id).single().execute().data
        assert member["user_id"] == DEMO.id
        assert member["role"] == "owner"

    @pytest.mark.asyncio
    async def test_create_adds_missing_profile(self, trips, client):
        newcomer = User(id="user-new", email="new@nest.app")

        await trips.create_trip(paris(), newcomer)

        profile = client.table("profiles").select("*").eq("id", "user-new").single().execute().data
        assert profile["email"] == "new@nest.app"

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError):
            TripCreate(destination="Rome", start_date=date(2026, 7, 3), end_date=date(2026, 7, 1))

    @pytest.mark.asyncio
    async def test_list_is_membership_scoped(self, trips, grandma):
        later = await trips.create_trip(
            TripCreate(destination="Lisbon", start_date=date(2026, 9, 1), end_date=date(2026, 9, 1)),
            DEMO,
        )
        sooner = await trips.create_trip(paris(), DEMO)
        await trips.create_trip(paris(), grandma)

        listing = await trips.list_trips(DEMO)

        assert listing.total == 2
        assert [t.id for t in listing.items] == [sooner.id, later.id]

    @pytest.mark.asyncio
    async def test_non_member_gets_not_found(self, trips, grandma):
        trip = await trips.create_trip(paris(), DEMO)

        with pytest.raises(NotFoundException):
            await trips.get_trip(trip.id, grandma)

    @pytest.mark.asyncio
    async def test_update(self, trips):
        trip = await trips.create_trip(paris(), DEMO)

        updated = await trips.update_trip(trip.id, TripUpdate(status="confirmed"), DEMO)

        assert updated.status == "confirmed"
        assert updated.destination == "Paris"

    @pytest.mark.asyncio
    async def test_viewer_cannot_update(self, trips, collaborators, grandma):
        trip = await trips.create_trip(paris(), DEMO)
        await collaborators.invite(trip.id, MemberInvite(email="grandma@nest.app"), DEMO)

        with pytest.raises(ForbiddenException):
            await trips.update_trip(trip.id, TripUpdate(name="Mine now"), grandma)

    @pytest.mark.asyncio
    async def test_delete_cascades(self, trips, itinerary, comments, client):
        trip = await trips.create_trip(paris(), DEMO)
        other = await trips.create_trip(paris(), DEMO)

        plan = await itinerary.get_itinerary(trip.id, DEMO)
        activity = await itinerary.create_activity(
            trip.id, ActivityCreate(day_id=plan.days[0].id, title="Louvre"), DEMO
        )
        await comments.add_comment(trip.id, activity.id, CommentCreate(comment="Book tickets"), DEMO)

        await trips.delete_trip(trip.id, DEMO)

        assert client.table("trips").select("id").execute().data == [{"id": other.id}]
        assert client.table("days").select("*").eq("trip_id", trip.id).execute().data == []
        assert client.table("days").select("*").eq("trip_id", other.id).execute().data != []
        assert client.table("activities").select("*").execute().data == []
        assert client.table("activity_comments").select("*").execute().data == []
        assert client.table("trip_members").select("*").eq("trip_id", trip.id).execute().data == []

    @pytest.mark.asyncio
    async def test_upload_cover(self, trips, client):
        trip = await trips.create_trip(paris(), DEMO)

        updated = await trips.upload_cover(trip.id, "beach.JPG", b"\xff\xd8", DEMO)

        assert updated.cover_image.startswith("https://images.unsplash.com/")

    @pytest.mark.asyncio
    async def test_upload_cover_rejects_bad_files(self, trips):
        trip = await trips.create_trip(paris(), DEMO)

        with pytest.raises(ValidationException):
            await trips.upload_cover(trip.id, "notes.txt", b"hello", DEMO)
        with pytest.raises(ValidationException):
            await trips.upload_cover(trip.id, "empty.png", b"", DEMO)


class TestItinerary:
    """Days and activities."""

    @pytest.mark.asyncio
    async def test_activities_ordered_by_start_time(self, trips, itinerary):
        trip = await trips.create_trip(paris(), DEMO)
        day = (await itinerary.get_itinerary(trip.id, DEMO)).days[0]

        await itinerary.create_activity(trip.id, ActivityCreate(day_id=day.id, title="Dinner", start_time="19:30"), DEMO)
        await itinerary.create_activity(trip.id, ActivityCreate(day_id=day.id, title="Museum", start_time="10:00"), DEMO)
        await itinerary.create_activity(trip.id, ActivityCreate(day_id=day.id, title="Wander"), DEMO)

        plan = await itinerary.get_itinerary(trip.id, DEMO)

        assert [a.title for a in plan.activities] == ["Museum", "Dinner", "Wander"]

    @pytest.mark.asyncio
    async def test_day_must_belong_to_trip(self, trips, itinerary):
        trip = await trips.create_trip(paris(), DEMO)
        other = await trips.create_trip(paris(), DEMO)
        foreign_day = (await itinerary.get_itinerary(other.id, DEMO)).days[0]

        with pytest.raises(ValidationException):
            await itinerary.create_activity(trip.id, ActivityCreate(day_id=foreign_day.id, title="x"), DEMO)

    @pytest.mark.asyncio
    async def test_update_clears_nullable_fields_only(self, trips, itinerary):
        trip = await trips.create_trip(paris(), DEMO)
        day = (await itinerary.get_itinerary(trip.id, DEMO)).days[1]
        activity = await itinerary.create_activity(
            trip.id,
            ActivityCreate(day_id=day.id, title="Picnic", category="food", start_time="12:00", notes="Bring a blanket"),
            DEMO,
        )

        updated = await itinerary.update_activity(
            trip.id, activity.id, ActivityUpdate(title=None, notes=None, cost=12.5), DEMO
        )

        assert updated.title == "Picnic"
        assert updated.notes is None
        assert updated.start_time == "12:00"
        assert updated.cost == 12.5

    @pytest.mark.asyncio
    async def test_activity_of_other_trip_is_not_found(self, trips, itinerary):
        trip = await trips.create_trip(paris(), DEMO)
        other = await trips.create_trip(paris(), DEMO)
        day = (await itinerary.get_itinerary(other.id, DEMO)).days[0]
        activity = await itinerary.create_activity(other.id, ActivityCreate(day_id=day.id, title="Seine"), DEMO)

        with pytest.raises(NotFoundException):
            await itinerary.delete_activity(trip.id, activity.id, DEMO)

    @pytest.mark.asyncio
    async def test_delete_activity(self, trips, itinerary):
        trip = await trips.create_trip(paris(), DEMO)
        day = (await itinerary.get_itinerary(trip.id, DEMO)).days[0]
        activity = await itinerary.create_activity(trip.id, ActivityCreate(day_id=day.id, title="Seine"), DEMO)

        await itinerary.delete_activity(trip.id, activity.id, DEMO)

        assert (await itinerary.get_itinerary(trip.id, DEMO)).activities == []


class TestCollaborators:
    """Membership management."""

    @pytest.mark.asyncio
    async def test_invite_and_list(self, trips, collaborators, grandma):
        trip = await trips.create_trip(paris(), DEMO)

        member = await collaborators.invite(trip.id, MemberInvite(email=" grandma@nest.app ", role="editor"), DEMO)
        listing = await collaborators.list_members(trip.id, grandma)

        assert member.role == "editor"
        assert member.profiles.email == "grandma@nest.app"
        assert listing.total == 2
        assert {m.profiles.email for m in listing.items} == {"demo@nest.app", "grandma@nest.app"}

    @pytest.mark.asyncio
    async def test_invite_unknown_email(self, trips, collaborators):
        trip = await trips.create_trip(paris(), DEMO)

        with pytest.raises(NotFoundException):
            await collaborators.invite(trip.id, MemberInvite(email="nobody@nest.app"), DEMO)

    @pytest.mark.asyncio
    async def test_invite_twice_conflicts(self, trips, collaborators, grandma):
        trip = await trips.create_trip(paris(), DEMO)
        await collaborators.invite(trip.id, MemberInvite(email="grandma@nest.app"), DEMO)

        with pytest.raises(ConflictException):
            await collaborators.invite(trip.id, MemberInvite(email="grandma@nest.app"), DEMO)

    @pytest.mark.asyncio
    async def test_only_owner_invites(self, trips, collaborators, grandma, client):
        trip = await trips.create_trip(paris(), DEMO)
        await collaborators.invite(trip.id, MemberInvite(email="grandma@nest.app", role="editor"), DEMO)
        client.table("profiles").insert({"id": "user-kid", "email": "kid@nest.app"}).execute()

        with pytest.raises(ForbiddenException):
            await collaborators.invite(trip.id, MemberInvite(email="kid@nest.app"), grandma)

    @pytest.mark.asyncio
    async def test_remove_member(self, trips, collaborators, grandma):
        trip = await trips.create_trip(paris(), DEMO)
        member = await collaborators.invite(trip.id, MemberInvite(email="grandma@nest.app"), DEMO)

        await collaborators.remove(trip.id, member.id, DEMO)

        with pytest.raises(NotFoundException):
            await trips.get_trip(trip.id, grandma)

    @pytest.mark.asyncio
    async def test_owner_cannot_be_removed(self, trips, collaborators):
        trip = await trips.create_trip(paris(), DEMO)
        owner = (await collaborators.list_members(trip.id, DEMO)).items[0]

        with pytest.raises(ValidationException):
            await collaborators.remove(trip.id, owner.id, DEMO)


class TestComments:
    """Activity comments."""

    async def _activity(self, trips, itinerary):
        trip = await trips.create_trip(paris(), DEMO)
        day = (await itinerary.get_itinerary(trip.id, DEMO)).days[0]
        activity = await itinerary.create_activity(trip.id, ActivityCreate(day_id=day.id, title="Louvre"), DEMO)
        return trip, activity

    @pytest.mark.asyncio
    async def test_viewer_can_comment(self, trips, itinerary, collaborators, comments, grandma):
        trip, activity = await self._activity(trips, itinerary)
        await collaborators.invite(trip.id, MemberInvite(email="grandma@nest.app"), DEMO)

        await comments.add_comment(trip.id, activity.id, CommentCreate(comment="Looks fun"), DEMO)
        await comments.add_comment(trip.id, activity.id, CommentCreate(comment="  Wear comfy shoes "), grandma)

        listing = await comments.list_comments(trip.id, activity.id, DEMO)

        assert [c.comment for c in listing.items] == ["Looks fun", "Wear comfy shoes"]
        assert [c.profiles.email for c in listing.items] == ["demo@nest.app", "grandma@nest.app"]

    @pytest.mark.asyncio
    async def test_author_without_profile_shows_unknown(self, trips, itinerary, comments, client):
        trip, activity = await self._activity(trips, itinerary)
        client.table("activity_comments").insert(
            {"activity_id": activity.id, "user_id": "user-gone", "comment": "old"}
        ).execute()

        listing = await comments.list_comments(trip.id, activity.id, DEMO)

        assert listing.items[0].profiles.email == "unknown"

    @pytest.mark.asyncio
    async def test_only_author_deletes(self, trips, itinerary, collaborators, comments, grandma):
        trip, activity = await self._activity(trips, itinerary)
        await collaborators.invite(trip.id, MemberInvite(email="grandma@nest.app"), DEMO)
        comment = await comments.add_comment(trip.id, activity.id, CommentCreate(comment="Mine"), DEMO)

        with pytest.raises(ForbiddenException):
            await comments.delete_comment(trip.id, activity.id, comment.id, grandma)

        await comments.delete_comment(trip.id, activity.id, comment.id, DEMO)
        assert (await comments.list_comments(trip.id, activity.id, DEMO)).total == 0
