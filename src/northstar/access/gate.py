"""
Access gate.

One decision table for every request, plus the landing decision made by the
root path. Both use is_onboarded() so they cannot disagree about whether a
user has finished the wizard.

    Session  | RouteClass        | Onboarded | Decision
    ---------+-------------------+-----------+------------------
    absent   | protected         | -         | redirect /login
    absent   | root/public/wiz.  | -         | allow
    present  | public            | any       | redirect /
    present  | wizard / root     | any       | allow
    present  | protected         | no        | redirect /wizard/0
    present  | protected         | yes       | allow
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping

from .onboarding import OnboardingLookup, OnboardingState, is_onboarded
from .routes import RouteClass, classify
from .session import Session, SessionResolver

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
HOME_PATH = "/"
WIZARD_START_PATH = "/wizard/0"

# Called only when the decision actually depends on onboarding state
StateLoader = Callable[[], OnboardingState | None]


class GateAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GateDecision:
    """Outcome of the gate for one request."""
    action: GateAction
    target: str | None = None

    @classmethod
    def allow(cls) -> "GateDecision":
        return cls(GateAction.ALLOW)

    @classmethod
    def redirect(cls, target: str) -> "GateDecision":
        return cls(GateAction.REDIRECT, target)

    @property
    def is_redirect(self) -> bool:
        return self.action == GateAction.REDIRECT


def decide(session: Session, route_class: RouteClass, load_state: StateLoader) -> GateDecision:
    """Apply the decision table. Pure apart from the lazy state load."""
    if not session.is_authenticated:
        if route_class == RouteClass.PROTECTED:
            return GateDecision.redirect(LOGIN_PATH)
        # Root sends anonymous users to /login itself
        return GateDecision.allow()

    if route_class == RouteClass.PUBLIC:
        return GateDecision.redirect(HOME_PATH)

    if route_class in (RouteClass.WIZARD, RouteClass.ROOT):
        return GateDecision.allow()

    if not is_onboarded(load_state()):
        return GateDecision.redirect(WIZARD_START_PATH)
    return GateDecision.allow()


def decide_root_landing(session: Session, state: OnboardingState | None) -> GateDecision:
    """Where "/" sends the caller. Always a redirect."""
    if not session.is_authenticated:
        return GateDecision.redirect(LOGIN_PATH)
    if not is_onboarded(state):
        return GateDecision.redirect(WIZARD_START_PATH)
    return GateDecision.redirect(state.landing_path)


@dataclass(frozen=True)
class GateResult:
    decision: GateDecision
    session: Session
    route_class: RouteClass
    onboarding: OnboardingState | None = None  # Only loaded for protected paths


class AccessGate:
    """Runs session resolution, classification and the decision table."""

    def __init__(self, resolver: SessionResolver, onboarding: OnboardingLookup):
        self._resolver = resolver
        self._onboarding = onboarding

    def load_state(self, session: Session) -> OnboardingState | None:
        if not session.is_authenticated:
            return None
        return self._onboarding.lookup(session.user_id, session.access_token)

    def evaluate(self, path: str, cookies: Mapping[str, str]) -> GateResult:
        # Identity check first; nothing may run before it
        session = self._resolver.resolve(cookies)

        route_class = classify(path)
        loaded: OnboardingState | None = None

        def load_state() -> OnboardingState | None:
            nonlocal loaded
            loaded = self.load_state(session)
            return loaded

        decision = decide(session, route_class, load_state)

        logger.debug(
            f"Gate {path} class={route_class.value} "
            f"user={session.user_id or '-'} -> {decision.action.value} {decision.target or ''}"
        )
        return GateResult(decision=decision, session=session, route_class=route_class, onboarding=loaded)

    def root_landing(self, session: Session) -> GateDecision:
        return decide_root_landing(session, self.load_state(session))
