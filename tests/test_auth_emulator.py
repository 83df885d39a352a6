"""Tests for the mock auth session emulator."""

import json

import pytest

from nest.auth.emulator import GUEST_EMAIL, MockAuth
from nest.auth.snapshot import STORAGE_KEY, SessionSnapshot
from nest.core.query_builder import QueryBuilder
from nest.core.table_store import TableStore


@pytest.fixture
def store():
    return TableStore({"profiles": [{"id": "user-123-mock", "email": "demo@nest.app"}]})


@pytest.fixture
def session_file(tmp_path):
    return tmp_path / "session.json"


@pytest.fixture
def make_auth(store, session_file):
    def _make() -> MockAuth:
        return MockAuth(
            table=lambda name: QueryBuilder(name, store),
            snapshot=SessionSnapshot(session_file),
        )

    return _make


class TestSubscriptions:
    """on_auth_state_change semantics."""

    def test_fires_immediately_when_signed_out(self, make_auth):
        auth = make_auth()
        events = []

        auth.on_auth_state_change(lambda event, session: events.append((event, session)))

        assert events == [("SIGNED_OUT", None)]

    def test_fires_immediately_with_current_session(self, make_auth):
        auth = make_auth()
        auth.sign_in_with_password({"email": "demo@nest.app", "password": "x"})
        events = []

        auth.on_auth_state_change(lambda event, session: events.append((event, session)))

        assert events[0][0] == "SIGNED_IN"
        assert events[0][1].user.id == "user-123-mock"

    def test_notifies_every_change(self, make_auth):
        auth = make_auth()
        events = []
        auth.on_auth_state_change(lambda event, session: events.append(event))

        auth.sign_in_with_password({"email": "demo@nest.app", "password": "x"})
        auth.update_user({"data": {"name": "Demo"}})
        auth.sign_out()

        assert events == ["SIGNED_OUT", "SIGNED_IN", "USER_UPDATED", "SIGNED_OUT"]

    def test_unsubscribe_stops_notifications(self, make_auth):
        auth = make_auth()
        events = []
        subscription = auth.on_auth_state_change(lambda event, session: events.append(event))

        subscription.unsubscribe()
        subscription.unsubscribe()
        auth.sign_in_anonymously()

        assert events == ["SIGNED_OUT"]


class TestSignIn:
    """Sign-in flows."""

    def test_sign_in_known_profile(self, make_auth, store):
        auth = make_auth()

        response = auth.sign_in_with_password({"email": "demo@nest.app", "password": "anything"})

        assert response.error is None
        assert response.user.id == "user-123-mock"
        assert response.session.access_token == "mock-token-user-123-mock"
        assert len(store.get_table("profiles")) == 1

    def test_sign_in_unknown_email_creates_profile(self, make_auth, store):
        auth = make_auth()

        response = auth.sign_in_with_password({"email": "new@nest.app", "password": "x"})

        profiles = store.get_table("profiles")
        assert len(profiles) == 2
        assert profiles[-1]["email"] == "new@nest.app"
        assert response.user.id == profiles[-1]["id"]

        again = auth.sign_in_with_password({"email": "new@nest.app", "password": "y"})
        assert again.user.id == response.user.id
        assert len(store.get_table("profiles")) == 2

    def test_sign_in_requires_email(self, make_auth):
        response = make_auth().sign_in_with_password({"email": " ", "password": "x"})

        assert response.session is None
        assert response.error["code"] == "validation_failed"

    def test_sign_up_does_not_touch_profiles(self, make_auth, store):
        auth = make_auth()

        response = auth.sign_up({"email": "fresh@nest.app", "password": "x"})

        assert response.user.email == "fresh@nest.app"
        assert auth.get_session() == response.session
        assert len(store.get_table("profiles")) == 1

    def test_anonymous_sign_in(self, make_auth):
        auth = make_auth()

        response = auth.sign_in_anonymously()

        assert response.user.is_anonymous is True
        assert response.user.role == "anonymous"
        assert response.user.email == GUEST_EMAIL
        assert response.user.id.startswith("guest-")
        assert response.session.access_token.startswith("guest-token-")

    def test_get_user_checks_token(self, make_auth):
        auth = make_auth()
        assert auth.get_user() is None

        session = auth.sign_in_with_password({"email": "demo@nest.app", "password": "x"}).session

        assert auth.get_user().id == "user-123-mock"
        assert auth.get_user(session.access_token).id == "user-123-mock"
        assert auth.get_user("mock-token-someone-else") is None

    def test_sign_in_replaces_session(self, make_auth):
        auth = make_auth()
        first = auth.sign_in_with_password({"email": "demo@nest.app", "password": "x"}).session
        auth.sign_in_with_password({"email": "other@nest.app", "password": "x"})

        assert auth.get_user(first.access_token) is None
        assert auth.get_user().email == "other@nest.app"


class TestAccount:
    """Account maintenance."""

    def test_update_user_requires_session(self, make_auth):
        response = make_auth().update_user({"email": "x@nest.app"})
        assert response.error["code"] == "session_not_found"

    def test_update_user_merges_metadata(self, make_auth):
        auth = make_auth()
        auth.sign_in_with_password({"email": "demo@nest.app", "password": "x"})

        auth.update_user({"data": {"name": "Demo"}})
        response = auth.update_user({"email": "renamed@nest.app", "password": "new", "data": {"kids": 2}})

        assert response.user.email == "renamed@nest.app"
        assert response.user.user_metadata == {"name": "Demo", "kids": 2}
        assert auth.get_user().email == "renamed@nest.app"

    def test_email_change_keeps_identity(self, make_auth, store):
        auth = make_auth()
        user_id = auth.sign_in_with_password({"email": "ana@nest.app", "password": "x"}).user.id

        auth.update_user({"email": "ana@new.app"})
        auth.sign_out()
        again = auth.sign_in_with_password({"email": "ana@new.app", "password": "x"})

        assert again.user.id == user_id
        emails = sorted(r["email"] for r in store.get_table("profiles"))
        assert emails == ["ana@new.app", "demo@nest.app"]

    def test_reset_password_is_accepted(self, make_auth):
        assert make_auth().reset_password_for_email("demo@nest.app") == {}


class TestSnapshot:
    """Session persistence across restarts."""

    def test_session_survives_restart(self, make_auth, session_file):
        make_auth().sign_in_with_password({"email": "demo@nest.app", "password": "x"})

        stored = json.loads(session_file.read_text())
        assert stored[STORAGE_KEY]["user"]["id"] == "user-123-mock"

        restored = make_auth()
        assert restored.get_user().id == "user-123-mock"

    def test_sign_out_removes_snapshot(self, make_auth, session_file):
        auth = make_auth()
        auth.sign_in_anonymously()
        assert session_file.exists()

        auth.sign_out()

        assert not session_file.exists()
        assert make_auth().get_session() is None

    def test_corrupt_snapshot_is_ignored(self, make_auth, session_file):
        session_file.write_text("{not json")
        assert make_auth().get_session() is None

        session_file.write_text(json.dumps({STORAGE_KEY: {"access_token": 1}}))
        assert make_auth().get_session() is None

    def test_disabled_snapshot(self, store):
        snapshot = SessionSnapshot(None)
        auth = MockAuth(table=lambda name: QueryBuilder(name, store), snapshot=snapshot)

        auth.sign_in_anonymously()

        assert snapshot.enabled is False
        assert snapshot.load() is None
