"""
Timezone-aware date helpers.

"Today" and "this week" are calendar concepts in the user's own timezone,
so every computation converts the current instant into the user's zone first
and only then takes the date. No offset arithmetic is done by hand, which keeps
half-hour and 45-minute zones and DST transition days correct.
"""

import logging
import os
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

UTC_NAME = "UTC"

# Common timezone options for the settings form
TIMEZONE_OPTIONS: list[dict[str, str]] = [
    {"value": "America/New_York", "label": "Eastern Time (US & Canada)"},
    {"value": "America/Chicago", "label": "Central Time (US & Canada)"},
    {"value": "America/Denver", "label": "Mountain Time (US & Canada)"},
    {"value": "America/Los_Angeles", "label": "Pacific Time (US & Canada)"},
    {"value": "America/Sao_Paulo", "label": "Brasilia Time"},
    {"value": "Europe/London", "label": "London"},
    {"value": "Europe/Paris", "label": "Paris"},
    {"value": "Europe/Berlin", "label": "Berlin"},
    {"value": "Asia/Tokyo", "label": "Tokyo"},
    {"value": "Asia/Shanghai", "label": "Shanghai"},
    {"value": "Asia/Singapore", "label": "Singapore"},
    {"value": "Australia/Sydney", "label": "Sydney"},
    {"value": "UTC", "label": "UTC"},
]


def resolve_timezone(name: str | None) -> tzinfo:
    """Return the zone for an IANA identifier, falling back to UTC.

    Never raises: a bad identifier stored in user settings must not break
    a page render.
    """
    if not name or name == UTC_NAME:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError, OSError):
        logger.warning(f"Unknown timezone {name!r}, falling back to UTC")
        return timezone.utc


def _utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def _local_date(tz_name: str | None, now: datetime | None) -> date:
    """Calendar date of `now` (default: the current instant) in the zone."""
    if now is None:
        now = _utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(resolve_timezone(tz_name)).date()


def current_calendar_day(tz_name: str | None, now: datetime | None = None) -> str:
    """Today's date (YYYY-MM-DD) in the given timezone."""
    return _local_date(tz_name, now).isoformat()


def current_week_start(tz_name: str | None, now: datetime | None = None) -> str:
    """Monday on or before today (YYYY-MM-DD) in the given timezone.

    Weeks always start on Monday regardless of locale: Sunday goes back six
    days, any other day goes back to the Monday of the same week.
    """
    today = _local_date(tz_name, now)
    # date.weekday(): Monday=0 .. Sunday=6, i.e. exactly the days since Monday
    return (today - timedelta(days=today.weekday())).isoformat()


def _parse_date_string(date_str: str) -> datetime:
    """Parse a date or ISO timestamp. Date-only strings mean UTC midnight."""
    if not date_str:
        raise ValueError("Empty date string")
    value = date_str.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_for_display(date_str: str, tz_name: str | None = UTC_NAME) -> str:
    """Long human-readable form, e.g. "Wednesday, March 13, 2024".

    Invalid timezones fall back to UTC. Unparseable dates raise ValueError.
    """
    local = _parse_date_string(date_str).astimezone(resolve_timezone(tz_name))
    return f"{local:%A}, {local:%B} {local.day}, {local.year}"


def _is_known_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def detect_client_timezone() -> str:
    """Best-effort IANA name of the local environment's timezone.

    Checks $TZ, then the /etc/localtime link. Returns "UTC" when neither
    resolves to a known zone.
    """
    try:
        tz_env = os.environ.get("TZ", "").lstrip(":")
        if tz_env and _is_known_zone(tz_env):
            return tz_env

        target = os.path.realpath("/etc/localtime")
        marker = "zoneinfo" + os.sep
        if marker in target:
            candidate = target.split(marker, 1)[1]
            if _is_known_zone(candidate):
                return candidate
    except Exception as e:
        logger.debug(f"Timezone detection failed: {e}")

    return UTC_NAME
