"""
Session resolution from the request cookie jar.

The identity provider is asked exactly once per request. Nothing else runs
between reading the cookies and that call: the provider may rotate the
refresh token, and any other work interleaved with it risks sending the
client a stale cookie jar (which shows up as random logouts).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Mapping, Protocol

from supabase import Client

from northstar.config import settings
from northstar.db.client import create_anon_client, get_client

logger = logging.getLogger(__name__)

# Refresh tokens outlive access tokens; keep the cookie around ~400 days
REFRESH_COOKIE_MAX_AGE = 60 * 60 * 24 * 400


@dataclass(frozen=True)
class CookieUpdate:
    """A cookie the response must set (token refresh)."""
    name: str
    value: str
    max_age: int | None = None


@dataclass
class Session:
    """Caller identity for a single request. Never stored."""
    user_id: str | None = None
    email: str | None = None
    access_token: str | None = None
    cookies_to_set: list[CookieUpdate] = field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)


class IdentityProvider(Protocol):
    """Anything that can turn a cookie jar into a Session."""

    def get_session(self, cookies: Mapping[str, str]) -> Session:
        ...


class SupabaseIdentityProvider:
    """
    Supabase Auth over cookies.

    Validates the access-token cookie; if it is missing or rejected and a
    refresh token is present, refreshes the session and records the new
    token pair in Session.cookies_to_set.
    """

    def __init__(
        self,
        client_getter: Callable[[], Client] = get_client,
        refresh_client_factory: Callable[[], Client] = create_anon_client,
        access_cookie: str | None = None,
        refresh_cookie: str | None = None,
    ):
        self._client_getter = client_getter
        self._refresh_client_factory = refresh_client_factory
        self._access_cookie = access_cookie
        self._refresh_cookie = refresh_cookie

    @property
    def access_cookie(self) -> str:
        return self._access_cookie or settings.access_token_cookie

    @property
    def refresh_cookie(self) -> str:
        return self._refresh_cookie or settings.refresh_token_cookie

    def get_session(self, cookies: Mapping[str, str]) -> Session:
        access_token = cookies.get(self.access_cookie)
        refresh_token = cookies.get(self.refresh_cookie)

        if access_token:
            try:
                user_response = self._client_getter().auth.get_user(access_token)
                if user_response and user_response.user:
                    user = user_response.user
                    return Session(user_id=user.id, email=user.email, access_token=access_token)
            except Exception as e:
                if not refresh_token:
                    raise
                logger.debug(f"Access token rejected, refreshing: {e}")

        if refresh_token:
            return self._refresh(refresh_token)

        return Session()

    def _refresh(self, refresh_token: str) -> Session:
        # Fresh client: refresh_session stores the new session on the client
        auth_response = self._refresh_client_factory().auth.refresh_session(refresh_token)
        new_session = auth_response.session if auth_response else None
        if not new_session or not auth_response.user:
            return Session()

        user = auth_response.user
        return Session(
            user_id=user.id,
            email=user.email,
            access_token=new_session.access_token,
            cookies_to_set=[
                CookieUpdate(self.access_cookie, new_session.access_token, new_session.expires_in),
                CookieUpdate(self.refresh_cookie, new_session.refresh_token, REFRESH_COOKIE_MAX_AGE),
            ],
        )


class SessionResolver:
    """Resolves the request's Session, degrading any provider failure to anonymous."""

    def __init__(self, provider: IdentityProvider):
        self._provider = provider

    def resolve(self, cookies: Mapping[str, str]) -> Session:
        try:
            session = self._provider.get_session(cookies)
        except Exception as e:
            logger.warning(f"Identity check failed, treating request as signed out: {e}")
            return Session()
        return session or Session()
