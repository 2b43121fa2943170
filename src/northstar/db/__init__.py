"""
Northstar - Database Client.

Supabase access for settings, wizard progress and the dashboard reads.
"""

from northstar.db.client import client_for, get_client, get_service_client

__all__ = [
    "client_for",
    "get_client",
    "get_service_client",
]
