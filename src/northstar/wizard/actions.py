"""
Wizard writes: saving a step's progress and finishing onboarding.

These are the only paths by which a signed-in user moves from "not onboarded"
to "onboarded". The gate itself only ever reads.
"""

import logging

from supabase import Client

from northstar.db.client import has_any_goal, mark_onboarding_completed, upsert_wizard_progress
from northstar.errors import OnboardingRequirementError, WizardWriteError

logger = logging.getLogger(__name__)

NO_GOALS_MESSAGE = "You need at least one goal to complete setup"


def save_step_progress(
    client: Client,
    user_id: str,
    step_id: str,
    payload: dict | None = None,
    completed: bool = False,
) -> dict | None:
    """Upsert the caller's progress for one wizard step."""
    try:
        row = upsert_wizard_progress(client, user_id, step_id, payload or {}, completed)
    except Exception as e:
        logger.error(f"Failed to save wizard step {step_id} for user {user_id}: {e}")
        raise WizardWriteError("Failed to save progress") from e

    logger.debug(f"Saved wizard step {step_id} for user {user_id} (completed={completed})")
    return row


def complete_onboarding(client: Client, user_id: str) -> None:
    """
    Mark onboarding as finished.

    Requires at least one goal. Raises OnboardingRequirementError otherwise,
    and WizardWriteError if the store cannot be read or written.
    """
    try:
        ready = has_any_goal(client, user_id)
    except Exception as e:
        logger.error(f"Failed to check goals for user {user_id}: {e}")
        raise WizardWriteError("Failed to complete onboarding") from e

    if not ready:
        raise OnboardingRequirementError(NO_GOALS_MESSAGE)

    try:
        mark_onboarding_completed(client, user_id)
    except Exception as e:
        logger.error(f"Failed to mark onboarding complete for user {user_id}: {e}")
        raise WizardWriteError("Failed to complete onboarding") from e

    logger.info(f"User {user_id} completed onboarding")
