"""
Northstar Web - FastAPI application.

Uses Supabase Auth (cookie-carried tokens) for authentication. Every request
goes through the access gate middleware before it reaches a route.
"""

import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from northstar import __version__
from northstar.access.gate import HOME_PATH, LOGIN_PATH, WIZARD_START_PATH, AccessGate
from northstar.access.onboarding import OnboardingLookup
from northstar.access.session import CookieUpdate, IdentityProvider, SessionResolver, SupabaseIdentityProvider
from northstar.config import settings
from northstar.db.client import ClientFactory, client_for, get_wizard_step_payload
from northstar.errors import OnboardingRequirementError, WizardWriteError
from northstar.logging_config import configure_logging
from northstar.web.auth import AuthenticatedUser, get_current_user, get_request_session
from northstar.web.dashboard_routes import router as dashboard_router
from northstar.web.dashboard_routes import setup_banner
from northstar.web.storage_routes import router as storage_router
from northstar.wizard.actions import complete_onboarding, save_step_progress
from northstar.wizard.steps import TOTAL_STEPS, get_step

logger = logging.getLogger(__name__)

# Infrastructure endpoints that never go through the gate
GATE_EXEMPT_PATHS = frozenset({"/health"})

REDIRECT_STATUS = 303


def apply_cookie_updates(response: Response, updates: list[CookieUpdate]) -> None:
    """Copy refreshed session cookies onto the outgoing response unchanged."""
    for update in updates:
        response.set_cookie(
            update.name,
            update.value,
            max_age=update.max_age,
            path="/",
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )


def _redirect(target: str) -> RedirectResponse:
    return RedirectResponse(target, status_code=REDIRECT_STATUS)


def _parse_step_number(step: str) -> int | None:
    try:
        return int(step)
    except ValueError:
        return None


class StepProgressRequest(BaseModel):
    """Body of a wizard step save."""

    payload: dict[str, Any] = Field(default_factory=dict)
    completed: bool = False


def create_app(
    identity_provider: IdentityProvider | None = None,
    client_factory: ClientFactory | None = None,
) -> FastAPI:
    """
    Build the application.

    The identity provider and database client factory are injected so tests
    (and alternative deployments) can swap them without touching globals.
    """
    client_factory = client_factory or client_for
    gate = AccessGate(
        SessionResolver(identity_provider or SupabaseIdentityProvider()),
        OnboardingLookup(client_factory),
    )

    app = FastAPI(title="Northstar", version=__version__)
    app.state.gate = gate
    app.state.client_factory = client_factory

    @app.on_event("startup")
    async def startup_event():
        """Log configuration on startup."""
        configure_logging(settings.log_level)
        logger.info("Northstar starting up...")
        logger.info(f"  Environment: {settings.northstar_env}")
        logger.info(f"  Storage bucket: {settings.storage_bucket}")

    @app.middleware("http")
    async def access_gate_middleware(request: Request, call_next):
        path = request.url.path
        if path in GATE_EXEMPT_PATHS:
            return await call_next(request)

        result = await run_in_threadpool(gate.evaluate, path, dict(request.cookies))
        request.state.session = result.session
        request.state.onboarding = result.onboarding

        if result.decision.is_redirect:
            response = _redirect(result.decision.target)
        else:
            response = await call_next(request)

        apply_cookie_updates(response, result.session.cookies_to_set)
        return response

    # CORS middleware for the frontend dev server (outermost, so preflights skip the gate)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(storage_router, prefix="/api")
    app.include_router(dashboard_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__, "service": "northstar"}

    # =========================================================================
    # Landing
    # =========================================================================

    @app.get("/")
    async def root(request: Request):
        """Send the caller to login, the wizard, or their default landing page."""
        decision = await run_in_threadpool(gate.root_landing, get_request_session(request))
        return _redirect(decision.target)

    # =========================================================================
    # Auth pages (credentials are handled by Supabase on the client)
    # =========================================================================

    @app.get("/login")
    async def login_page():
        return {"page": "login"}

    @app.get("/signup")
    async def signup_page():
        return {"page": "signup"}

    @app.get("/reset-password")
    async def reset_password_page():
        return {"page": "reset-password"}

    # =========================================================================
    # Onboarding wizard
    # =========================================================================

    @app.get("/wizard")
    async def wizard_index():
        return _redirect(WIZARD_START_PATH)

    @app.get("/wizard/{step}")
    async def wizard_step(request: Request, step: str):
        """One wizard page: step metadata plus whatever was saved for it."""
        step_number = _parse_step_number(step)
        wizard_page = get_step(step_number) if step_number is not None else None
        if wizard_page is None:
            return _redirect(WIZARD_START_PATH)

        session = get_request_session(request)
        if not session.is_authenticated:
            return _redirect(LOGIN_PATH)

        client = client_factory(session.access_token)
        return {
            "step": {
                "id": wizard_page.id,
                "title": wizard_page.title,
                "description": wizard_page.description,
                "estimated_minutes": wizard_page.estimated_minutes,
            },
            "step_number": wizard_page.number,
            "total_steps": TOTAL_STEPS,
            "initial_data": get_wizard_step_payload(client, session.user_id, wizard_page.id),
            "setup": setup_banner(client, session.user_id),
        }

    @app.post("/wizard/complete")
    async def wizard_complete(user: AuthenticatedUser = Depends(get_current_user)):
        """Finish onboarding (needs at least one goal), then land via the root."""
        client = client_factory(user.access_token)
        try:
            await run_in_threadpool(complete_onboarding, client, user.id)
        except OnboardingRequirementError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except WizardWriteError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return _redirect(HOME_PATH)

    @app.post("/wizard/{step}")
    async def wizard_save_step(
        step: str,
        body: StepProgressRequest,
        user: AuthenticatedUser = Depends(get_current_user),
    ):
        """Save the payload for one wizard step, optionally marking it complete."""
        step_number = _parse_step_number(step)
        wizard_page = get_step(step_number) if step_number is not None else None
        if wizard_page is None:
            raise HTTPException(status_code=404, detail="Unknown wizard step")

        client = client_factory(user.access_token)
        try:
            await run_in_threadpool(
                save_step_progress, client, user.id, wizard_page.id, body.payload, body.completed
            )
        except WizardWriteError as e:
            raise HTTPException(status_code=500, detail=str(e))

        return {"success": True, "step_id": wizard_page.id, "completed": body.completed}

    return app


app = create_app()
