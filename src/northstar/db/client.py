"""
Northstar - Supabase Client.

Low-level database access. Dashboard views read through the helpers below;
each is a plain select scoped to the requesting user. The wizard writes its
progress and the onboarding flag through the upsert helpers at the bottom.
"""

from datetime import datetime, timezone
from typing import Any, Callable

from supabase import Client, ClientOptions, create_client

from northstar.config import settings

# Given the caller's access token (or None), return a client to query with
ClientFactory = Callable[[str | None], Client]

# Singleton client instances
_client: Client | None = None
_service_client: Client | None = None


def get_client() -> Client:
    """
    Get the anonymous Supabase client.

    Uses singleton pattern to reuse connection. Only used for calls that
    carry their own credentials (e.g. auth.get_user(token)).
    """
    global _client

    if _client is None:
        _client = create_client(
            settings.supabase_url,
            settings.supabase_anon_key,
        )

    return _client


def get_service_client() -> Client:
    """Get the service-role client, or the anonymous one if no key is set."""
    global _service_client

    if _service_client is None:
        key = settings.supabase_service_role_key or settings.supabase_anon_key
        _service_client = create_client(settings.supabase_url, key)

    return _service_client


def create_anon_client() -> Client:
    """Fresh, unshared anonymous client (for calls that store session state)."""
    return create_client(settings.supabase_url, settings.supabase_anon_key)


def get_authenticated_client(access_token: str) -> Client:
    """Client acting as the user, so row-level security applies."""
    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(headers={"Authorization": f"Bearer {access_token}"}),
    )


def client_for(access_token: str | None) -> Client:
    """Default ClientFactory: user-scoped when a token is known."""
    if access_token:
        return get_authenticated_client(access_token)
    return get_service_client()


def _rows(response: Any) -> list[dict]:
    if response is None:
        return []
    return response.data or []


# =============================================================================
# Settings Operations
# =============================================================================


def get_user_settings(client: Client, user_id: str, columns: str = "*") -> dict | None:
    """Get the user's settings row, or None for a brand-new user."""
    response = (
        client.table("user_settings")
        .select(columns)
        .eq("user_id", user_id)
        .maybe_single()
        .execute()
    )
    # maybe_single() returns None (not an empty response) when no row matches
    if response is None:
        return None
    return response.data


# =============================================================================
# Today Operations
# =============================================================================


def get_active_habits(client: Client, user_id: str) -> list[dict]:
    """Get the user's active habits."""
    response = (
        client.table("habits").select("*").eq("user_id", user_id).eq("status", "active").execute()
    )
    return _rows(response)


def get_habit_logs(client: Client, user_id: str, log_date: str) -> list[dict]:
    """Get habit logs for one calendar day (YYYY-MM-DD)."""
    response = (
        client.table("habit_logs").select("*").eq("user_id", user_id).eq("log_date", log_date).execute()
    )
    return _rows(response)


def get_next_actions(client: Client, user_id: str) -> list[dict]:
    """Get open tasks flagged as next actions, with their project."""
    response = (
        client.table("tasks")
        .select("*, project:projects(id, title, goal_id)")
        .eq("user_id", user_id)
        .eq("is_next_action", True)
        .eq("status", "open")
        .order("created_at")
        .execute()
    )
    return _rows(response)


# =============================================================================
# Vision Operations
# =============================================================================


def get_vision_tiles(client: Client, user_id: str, limit: int | None = None) -> list[dict]:
    """Get vision tiles, pinned first then newest."""
    query = (
        client.table("vision_tiles")
        .select("*")
        .eq("user_id", user_id)
        .order("pinned", desc=True)
        .order("created_at", desc=True)
    )
    if limit:
        query = query.limit(limit)
    return _rows(query.execute())


def get_identity_statements(client: Client, user_id: str) -> list[dict]:
    """Get identity statements in display order."""
    response = (
        client.table("identity_statements")
        .select("*")
        .eq("user_id", user_id)
        .order("sort_order")
        .execute()
    )
    return _rows(response)


# =============================================================================
# Inbox Operations
# =============================================================================


def get_inbox_items(client: Client, user_id: str) -> list[dict]:
    """Get unprocessed inbox items, newest first."""
    response = (
        client.table("inbox_items")
        .select("*, goal:goals(id, title), project:projects(id, title)")
        .eq("user_id", user_id)
        .eq("status", "inbox")
        .order("created_at", desc=True)
        .execute()
    )
    return _rows(response)


# =============================================================================
# Wizard Operations
# =============================================================================


def get_wizard_step_payload(client: Client, user_id: str, step_id: str) -> dict:
    """Get the saved payload for one wizard step ({} if never saved)."""
    response = (
        client.table("wizard_progress")
        .select("payload")
        .eq("user_id", user_id)
        .eq("step_id", step_id)
        .maybe_single()
        .execute()
    )
    if response is None or not response.data:
        return {}
    return response.data.get("payload") or {}


def upsert_wizard_progress(
    client: Client,
    user_id: str,
    step_id: str,
    payload: dict,
    completed: bool = False,
) -> dict | None:
    """Insert or replace the progress row for one (user, step)."""
    now = datetime.now(timezone.utc).isoformat()
    response = (
        client.table("wizard_progress")
        .upsert(
            {
                "user_id": user_id,
                "step_id": step_id,
                "payload": payload,
                "completed": completed,
                "completed_at": now if completed else None,
                "updated_at": now,
            },
            on_conflict="user_id,step_id",
        )
        .execute()
    )
    rows = _rows(response)
    return rows[0] if rows else None


# =============================================================================
# Onboarding Operations
# =============================================================================


def has_any_goal(client: Client, user_id: str) -> bool:
    """Whether the user has created at least one goal."""
    response = client.table("goals").select("id").eq("user_id", user_id).limit(1).execute()
    return bool(_rows(response))


def mark_onboarding_completed(client: Client, user_id: str) -> None:
    """Set onboarding_completed, creating the settings row if it is missing."""
    client.table("user_settings").upsert(
        {
            "user_id": user_id,
            "onboarding_completed": True,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        },
        on_conflict="user_id",
    ).execute()
