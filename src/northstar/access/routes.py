"""
Route classification for the request gate.

Matching is by case-sensitive prefix, checked in a fixed order:
public prefixes, then the exact root, then the wizard prefix.
"""

from enum import Enum


class RouteClass(str, Enum):
    """Access category of a request path."""
    PUBLIC = "public"          # Auth pages: reachable only while signed out
    ROOT = "root"              # "/" decides its own landing redirect
    WIZARD = "wizard"          # Onboarding: reachable before completion
    PROTECTED = "protected"    # Everything else: signed in and onboarded


PUBLIC_ROUTE_PREFIXES: tuple[str, ...] = ("/login", "/signup", "/reset-password")
WIZARD_PREFIX = "/wizard"
ROOT_PATH = "/"


def classify(path: str) -> RouteClass:
    """Map a request path to its RouteClass."""
    if any(path.startswith(prefix) for prefix in PUBLIC_ROUTE_PREFIXES):
        return RouteClass.PUBLIC
    if path == ROOT_PATH:
        return RouteClass.ROOT
    if path.startswith(WIZARD_PREFIX):
        return RouteClass.WIZARD
    return RouteClass.PROTECTED
