"""
Authentication utilities for FastAPI routes.

The access gate middleware resolves the session once per request and stores
it on request.state; route dependencies read it from there instead of asking
the identity provider again.
"""

import logging

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel
from supabase import Client

from northstar.access.session import Session

logger = logging.getLogger(__name__)


class AuthenticatedUser(BaseModel):
    """Authenticated user info from the request session."""
    id: str
    email: str | None = None
    access_token: str | None = None


def get_request_session(request: Request) -> Session:
    """Session resolved by the gate, or an anonymous one if the gate was skipped."""
    return getattr(request.state, "session", None) or Session()


async def get_current_user(request: Request) -> AuthenticatedUser:
    """Require a signed-in caller (401 otherwise)."""
    session = get_request_session(request)
    if not session.is_authenticated:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return AuthenticatedUser(
        id=session.user_id,
        email=session.email,
        access_token=session.access_token,
    )


async def get_user_client(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
) -> Client:
    """Database client acting as the current user."""
    return request.app.state.client_factory(user.access_token)
