"""NEST Auth Module.

Bearer tokens are the access tokens issued by the session emulator
(``mock-token-<user id>``). A request is authenticated when its token is the
active session's token.
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from supabase import AuthError

from nest.auth.schemas import MockSession, MockUser, User
from nest.exceptions import UnauthorizedException

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Resolve the bearer token to the signed-in user."""
    from nest.core.supabase_client import get_supabase_client

    if not credentials:
        raise UnauthorizedException("Missing authentication token")

    try:
        result = get_supabase_client().auth.get_user(credentials.credentials)
    except AuthError as e:
        raise UnauthorizedException(f"Invalid token: {e}")
    # supabase-py wraps the user in a UserResponse; the emulator returns it bare.
    auth_user = getattr(result, "user", result)
    if auth_user is None:
        raise UnauthorizedException("Session expired or signed out")

    return User(
        id=str(auth_user.id),
        email=auth_user.email,
        is_anonymous=bool(getattr(auth_user, "is_anonymous", False)),
        access_token=credentials.credentials,
    )


__all__ = [
    "get_current_user",
    "MockSession",
    "MockUser",
    "User",
]
