"""
Onboarding wizard support.

The step table is the single source of step ordering and labels for both
the wizard views and the "setup incomplete" banner. Saving progress and
completing onboarding live in actions.
"""

from .steps import WIZARD_STEPS, STEP_LABELS, TOTAL_STEPS, WizardStep, step_label
from .progress import SetupProjection, WizardStepRecord, project_setup
from .actions import complete_onboarding, save_step_progress

__all__ = [
    "WIZARD_STEPS",
    "STEP_LABELS",
    "TOTAL_STEPS",
    "WizardStep",
    "step_label",
    "SetupProjection",
    "WizardStepRecord",
    "project_setup",
    "complete_onboarding",
    "save_step_progress",
]
