"""
Onboarding state lookup.

Reads the user's settings row to learn whether the wizard is finished and
where a finished user lands. A missing row is a normal state (new user) and
means "not onboarded", exactly like onboarding_completed = false.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from northstar.db.client import ClientFactory, client_for, get_user_settings

logger = logging.getLogger(__name__)

SETTINGS_COLUMNS = "onboarding_completed, default_landing, timezone"


class DefaultLanding(str, Enum):
    """Dashboard view a finished user is sent to from "/"."""
    TODAY = "today"
    VISION = "vision"
    INBOX = "inbox"


LANDING_PATHS: dict[DefaultLanding, str] = {
    DefaultLanding.TODAY: "/today",
    DefaultLanding.VISION: "/vision",
    DefaultLanding.INBOX: "/inbox",
}

DEFAULT_LANDING_PATH = LANDING_PATHS[DefaultLanding.TODAY]


def _parse_landing(value: Any) -> DefaultLanding | None:
    try:
        return DefaultLanding(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class OnboardingState:
    """Snapshot of the settings fields the gate inspects."""
    user_id: str
    onboarding_completed: bool = False
    default_landing: DefaultLanding | None = None
    timezone: str | None = None

    @classmethod
    def from_row(cls, user_id: str, row: dict[str, Any]) -> "OnboardingState":
        return cls(
            user_id=user_id,
            onboarding_completed=bool(row.get("onboarding_completed")),
            default_landing=_parse_landing(row.get("default_landing")),
            timezone=row.get("timezone") or None,
        )

    @property
    def landing_path(self) -> str:
        if self.default_landing is None:
            return DEFAULT_LANDING_PATH
        return LANDING_PATHS[self.default_landing]


def is_onboarded(state: OnboardingState | None) -> bool:
    """The one onboarding predicate shared by the gate and the root landing."""
    return state is not None and state.onboarding_completed


class OnboardingLookup:
    """Single-row fetch of a user's onboarding state."""

    def __init__(self, client_factory: ClientFactory = client_for):
        self._client_factory = client_factory

    def lookup(self, user_id: str, access_token: str | None = None) -> OnboardingState | None:
        """
        Return the user's OnboardingState, or None.

        None covers both "no settings row yet" and "store unreachable"; in
        both cases the user is treated as not onboarded. No retries.
        """
        try:
            client = self._client_factory(access_token)
            row = get_user_settings(client, user_id, SETTINGS_COLUMNS)
        except Exception as e:
            logger.warning(f"Failed to load settings for user {user_id}, treating as not onboarded: {e}")
            return None

        if not row:
            return None
        return OnboardingState.from_row(user_id, row)
