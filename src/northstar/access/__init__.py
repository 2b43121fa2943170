"""
Request access control.

Every request passes through AccessGate: resolve the session from cookies,
classify the path, and (for protected paths) check onboarding completion.
"""

from .gate import AccessGate, GateAction, GateDecision, GateResult, decide, decide_root_landing
from .onboarding import DefaultLanding, OnboardingLookup, OnboardingState, is_onboarded
from .routes import RouteClass, classify
from .session import CookieUpdate, IdentityProvider, Session, SessionResolver, SupabaseIdentityProvider

__all__ = [
    "AccessGate",
    "GateAction",
    "GateDecision",
    "GateResult",
    "decide",
    "decide_root_landing",
    "DefaultLanding",
    "OnboardingLookup",
    "OnboardingState",
    "is_onboarded",
    "RouteClass",
    "classify",
    "CookieUpdate",
    "IdentityProvider",
    "Session",
    "SessionResolver",
    "SupabaseIdentityProvider",
]
