"""
Wizard step table.

Steps "0".."13" are tracked in wizard_progress. Step "14" (Finish) is the
launch screen and has no progress row of its own.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class WizardStep:
    """One page of the onboarding wizard."""
    id: str
    title: str
    description: str
    estimated_minutes: int
    banner_label: str | None = None  # Longer name used in "Continue ..." hints

    @property
    def number(self) -> int:
        return int(self.id)

    @property
    def label(self) -> str:
        return self.banner_label or self.title

    @property
    def path(self) -> str:
        return f"/wizard/{self.id}"


WIZARD_STEPS: list[WizardStep] = [
    WizardStep("0", "Welcome", "Set your intention and baseline", 3, banner_label="Welcome & Baseline"),
    WizardStep("1", "Brain Dump", "Offload everything on your mind", 10),
    WizardStep("2", "Values", "Define what matters most", 15),
    WizardStep("3", "Identity", "Who you are becoming", 8),
    WizardStep("4", "Year Theme", "Your compass for the year", 8),
    WizardStep("5", "Life Domains", "Areas of your life to balance", 6),
    WizardStep("6", "Visualization", "Paint your future", 20),
    WizardStep("7", "Goals", "Your annual outcomes", 25),
    WizardStep("8", "Lead Indicators", "Weekly behaviors you control", 15),
    WizardStep("9", "Projects", "Finite outcomes with next actions", 20),
    WizardStep("10", "WOOP & If-Then", "Prepare for obstacles", 15),
    WizardStep("11", "Habits", "Daily and weekly rituals", 12),
    WizardStep("12", "Cadence", "Your rhythm and reminders", 5),
    WizardStep("13", "Preferences", "Customize your dashboard", 3),
    WizardStep("14", "Finish", "Review and launch", 2),
]

TOTAL_STEPS = len(WIZARD_STEPS)

FINISH_STEP_ID = "14"

# Labels for the steps that carry progress rows ("0".."13")
STEP_LABELS: dict[str, str] = {
    step.id: step.label for step in WIZARD_STEPS if step.id != FINISH_STEP_ID
}


def step_label(step_number: int) -> str:
    """Label for a tracked step, or "Step {n}" for unknown numbers."""
    return STEP_LABELS.get(str(step_number), f"Step {step_number}")


def get_step(step_number: int) -> WizardStep | None:
    """Look up a wizard page by number (including Finish)."""
    if 0 <= step_number < TOTAL_STEPS:
        return WIZARD_STEPS[step_number]
    return None


def total_estimated_minutes() -> int:
    return sum(step.estimated_minutes for step in WIZARD_STEPS)
