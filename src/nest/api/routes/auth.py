"""NEST Auth Routes.

HTTP surface over the session emulator. Sign-up also creates the user's
profile row so collaborators can find them by email.

Errors are unified under:
{ "error": { "code": "...", "message": "..." } }
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from nest.auth import get_current_user
from nest.auth.schemas import AuthResponse, MockSession, User
from nest.core.supabase_client import get_supabase_client
from nest.exceptions import NestException
from nest.modules.collaborators.repository import ProfilesRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


class CredentialsIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1)


class ResetPasswordIn(BaseModel):
    email: str = Field(min_length=3, max_length=320)


class UserUpdateIn(BaseModel):
    email: str | None = None
    password: str | None = None
    data: dict | None = None


class SessionOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    refresh_token: str
    user: User


def _session_out(response: AuthResponse) -> SessionOut:
    # supabase-py raises instead of returning an error field
    error = getattr(response, "error", None)
    if error or response.session is None:
        error = error or {}
        raise NestException(
            code=str(error.get("code", "AUTH_ERROR")).upper(),
            message=error.get("message", "Authentication failed"),
            status_code=400,
        )
    return _to_out(response.session)


def _to_out(session: MockSession) -> SessionOut:
    return SessionOut(
        access_token=session.access_token,
        token_type=session.token_type,
        expires_in=session.expires_in,
        refresh_token=session.refresh_token,
        user=User(
            id=str(session.user.id),
            email=session.user.email,
            is_anonymous=bool(session.user.is_anonymous),
        ),
    )


@router.post("/sign-up", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
async def sign_up(data: CredentialsIn) -> SessionOut:
    client = get_supabase_client()
    out = _session_out(client.auth.sign_up({"email": data.email, "password": data.password}))
    await ProfilesRepository(client).ensure_profile(out.user.id, out.user.email)
    return out


@router.post("/sign-in", response_model=SessionOut)
async def sign_in(data: CredentialsIn) -> SessionOut:
    client = get_supabase_client()
    return _session_out(client.auth.sign_in_with_password({"email": data.email, "password": data.password}))


@router.post("/anonymous", response_model=SessionOut)
async def sign_in_anonymously() -> SessionOut:
    return _session_out(get_supabase_client().auth.sign_in_anonymously())


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(user: User = Depends(get_current_user)):
    get_supabase_client().auth.sign_out()
    logger.info(f"Signed out {user.id}")
    return None


@router.get("/session", response_model=User)
async def get_session(user: User = Depends(get_current_user)) -> User:
    """The user behind the bearer token."""
    return user


@router.post("/reset-password", status_code=status.HTTP_202_ACCEPTED)
async def reset_password(data: ResetPasswordIn) -> dict:
    get_supabase_client().auth.reset_password_for_email(data.email)
    return {"status": "accepted"}


@router.patch("/user", response_model=SessionOut)
async def update_user(data: UserUpdateIn, user: User = Depends(get_current_user)) -> SessionOut:
    attributes = data.model_dump(exclude_none=True)
    return _session_out(get_supabase_client().auth.update_user(attributes))
