"""
Dashboard views: today, vision, inbox.

Thin reads of the user's records. The gate has already guaranteed a signed-in,
onboarded caller by the time these run.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from supabase import Client

from northstar.config import settings
from northstar.dates import current_calendar_day, current_week_start, format_for_display
from northstar.db.client import (
    get_active_habits,
    get_habit_logs,
    get_identity_statements,
    get_inbox_items,
    get_next_actions,
    get_vision_tiles,
)
from northstar.web.auth import AuthenticatedUser, get_current_user, get_user_client
from northstar.wizard.progress import load_wizard_progress, project_setup

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dashboard"])

TODAY_VISION_TILE_LIMIT = 10


def user_timezone(request: Request) -> str:
    """Stored timezone from the settings row the gate loaded, else the default."""
    state = getattr(request.state, "onboarding", None)
    return (state.timezone if state else None) or settings.default_timezone


def setup_banner(client: Client, user_id: str) -> dict[str, Any] | None:
    """Banner model for unfinished wizard steps (None hides the banner)."""
    projection = project_setup(load_wizard_progress(client, user_id))
    return projection.to_dict() if projection else None


@router.get("/today")
async def today_view(
    request: Request,
    user: AuthenticatedUser = Depends(get_current_user),
    client: Client = Depends(get_user_client),
):
    """Today's habits, next actions and vision tiles, in the user's timezone."""
    tz_name = user_timezone(request)
    today = current_calendar_day(tz_name)

    habits = get_active_habits(client, user.id)
    logs_by_habit = {log.get("habit_id"): log for log in get_habit_logs(client, user.id, today)}

    return {
        "date": today,
        "display_date": format_for_display(today),
        "week_start": current_week_start(tz_name),
        "timezone": tz_name,
        "habits": [{**habit, "today_log": logs_by_habit.get(habit.get("id"))} for habit in habits],
        "next_actions": get_next_actions(client, user.id),
        "vision_tiles": get_vision_tiles(client, user.id, limit=TODAY_VISION_TILE_LIMIT),
        "setup": setup_banner(client, user.id),
    }


@router.get("/vision")
async def vision_view(
    user: AuthenticatedUser = Depends(get_current_user),
    client: Client = Depends(get_user_client),
):
    """Vision board tiles and identity statements."""
    return {
        "vision_tiles": get_vision_tiles(client, user.id),
        "identity_statements": get_identity_statements(client, user.id),
        "setup": setup_banner(client, user.id),
    }


@router.get("/inbox")
async def inbox_view(
    user: AuthenticatedUser = Depends(get_current_user),
    client: Client = Depends(get_user_client),
):
    """Unprocessed inbox items."""
    return {
        "inbox_items": get_inbox_items(client, user.id),
        "setup": setup_banner(client, user.id),
    }
