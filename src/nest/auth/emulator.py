"""NEST Auth - Session emulator.

In-process stand-in for Supabase Auth. Holds at most one active session,
notifies subscribers on every change and mirrors the session into a local
snapshot so a restart keeps the user signed in.

Any password is accepted. Profiles are looked up (and created on demand)
through the same mock query builder the rest of the app uses.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Literal
from uuid import uuid4

from nest.auth.schemas import AuthResponse, MockSession, MockUser
from nest.auth.snapshot import SessionSnapshot
from nest.core.query_builder import QueryBuilder

logger = logging.getLogger(__name__)

AuthEvent = Literal["SIGNED_IN", "SIGNED_OUT", "USER_UPDATED"]
AuthCallback = Callable[[AuthEvent, MockSession | None], None]

GUEST_EMAIL = "guest@nest.app"


class Subscription:
    """Handle returned by ``on_auth_state_change``."""

    def __init__(self, subscribers: list[AuthCallback], callback: AuthCallback):
        self._subscribers = subscribers
        self.callback = callback

    def unsubscribe(self) -> None:
        if self.callback in self._subscribers:
            self._subscribers.remove(self.callback)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _session_for(user: MockUser, token_prefix: str = "mock") -> MockSession:
    return MockSession(
        access_token=f"{token_prefix}-token-{user.id}",
        refresh_token=f"{token_prefix}-refresh-{user.id}",
        user=user,
    )


class MockAuth:
    """
    Mock auth client.

    Boundary used by the rest of the app:
    - get_session() / get_user(): current identity or None
    - set_session(): replace identity and notify subscribers
    - on_auth_state_change(): subscribe, returns a Subscription
    """

    def __init__(
        self,
        table: Callable[[str], QueryBuilder],
        snapshot: SessionSnapshot | None = None,
        latency: float = 0.0,
    ):
        self._table = table
        self._snapshot = snapshot or SessionSnapshot(None)
        self._latency = latency
        self._subscribers: list[AuthCallback] = []
        self._session: MockSession | None = self._snapshot.load()

        if self._session is not None:
            logger.info(f"Restored mock session for {self._session.user.email or self._session.user.id}")

    def _delay(self) -> None:
        if self._latency:
            time.sleep(self._latency)

    # -------------------------------------------------------------------------
    # Session state
    # -------------------------------------------------------------------------

    def get_session(self) -> MockSession | None:
        return self._session

    def get_user(self, jwt: str | None = None) -> MockUser | None:
        """Current user; with ``jwt``, only if it is the active access token."""
        if self._session is None:
            return None
        if jwt is not None and self._session.access_token != jwt:
            return None
        return self._session.user

    def set_session(self, session: MockSession | None, event: AuthEvent | None = None) -> None:
        self._session = session
        self._snapshot.save(session)

        event = event or ("SIGNED_IN" if session else "SIGNED_OUT")
        for callback in list(self._subscribers):
            callback(event, session)

    def on_auth_state_change(self, callback: AuthCallback) -> Subscription:
        """Register ``callback``; it fires immediately with the current state."""
        self._subscribers.append(callback)
        callback("SIGNED_IN" if self._session else "SIGNED_OUT", self._session)
        return Subscription(self._subscribers, callback)

    # -------------------------------------------------------------------------
    # Sign in / out
    # -------------------------------------------------------------------------

    def sign_up(self, credentials: dict) -> AuthResponse:
        """Create a new identity and sign it in. The caller owns the profile row."""
        self._delay()
        email = (credentials.get("email") or "").strip()
        if not email:
            return AuthResponse(error={"code": "validation_failed", "message": "Email is required"})

        user = MockUser(id=str(uuid4()), email=email, created_at=_now_iso())
        session = _session_for(user)
        self.set_session(session)
        logger.info(f"Mock sign-up: {email}")
        return AuthResponse(user=user, session=session)

    def sign_in_with_password(self, credentials: dict) -> AuthResponse:
        """Sign in as the profile with ``email``, creating it if unknown."""
        self._delay()
        email = (credentials.get("email") or "").strip()
        if not email:
            return AuthResponse(error={"code": "validation_failed", "message": "Email is required"})

        profile = self._table("profiles").select("*").eq("email", email).maybe_single().execute().data
        if profile is None:
            profile = self._table("profiles").insert({"email": email}).single().execute().data

        user = MockUser(id=profile["id"], email=profile["email"], created_at=profile.get("created_at"))
        session = _session_for(user)
        self.set_session(session)
        logger.info(f"Mock sign-in: {email}")
        return AuthResponse(user=user, session=session)

    def sign_in_anonymously(self) -> AuthResponse:
        self._delay()
        user = MockUser(
            id=f"guest-{uuid4()}",
            email=GUEST_EMAIL,
            role="anonymous",
            created_at=_now_iso(),
            is_anonymous=True,
        )
        session = _session_for(user, token_prefix="guest")
        self.set_session(session)
        logger.info(f"Mock anonymous sign-in: {user.id}")
        return AuthResponse(user=user, session=session)

    def sign_out(self) -> None:
        self._delay()
        self.set_session(None)

    # -------------------------------------------------------------------------
    # Account maintenance
    # -------------------------------------------------------------------------

    def reset_password_for_email(self, email: str) -> dict:
        """Accepted and ignored; no mail is sent in mock mode."""
        self._delay()
        logger.info(f"Mock password reset requested for {email}")
        return {}

    def update_user(self, attributes: dict) -> AuthResponse:
        """Update the signed-in user. ``password`` is accepted and dropped."""
        self._delay()
        if self._session is None:
            return AuthResponse(error={"code": "session_not_found", "message": "No active session"})

        user = self._session.user.model_copy(deep=True)
        if attributes.get("email"):
            user.email = attributes["email"]
            # profiles.email follows the account email
            self._table("profiles").update({"email": user.email}).eq("id", user.id).execute()
        if attributes.get("data"):
            user.user_metadata.update(attributes["data"])

        session = self._session.model_copy(update={"user": user})
        self.set_session(session, event="USER_UPDATED")
        return AuthResponse(user=user, session=session)
