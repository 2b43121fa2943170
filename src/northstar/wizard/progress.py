"""
Setup-completeness projection.

Turns the per-step wizard_progress rows into what the "setup incomplete"
banner needs: how many steps remain and where "Continue" should link to.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from supabase import Client

from .steps import step_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WizardStepRecord:
    """One wizard_progress row (only the fields the projection reads)."""
    step_id: str
    completed: bool = False
    user_id: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "WizardStepRecord":
        return cls(
            step_id=str(row.get("step_id", "")),
            completed=bool(row.get("completed")),
            user_id=row.get("user_id"),
        )


@dataclass(frozen=True)
class SetupProjection:
    """Remaining onboarding work. Only produced when something remains."""
    remaining: list[WizardStepRecord] = field(default_factory=list)
    first_incomplete_step: int | None = None
    label: str = "setup"

    @property
    def remaining_count(self) -> int:
        return len(self.remaining)

    @property
    def continue_path(self) -> str:
        step = self.first_incomplete_step if self.first_incomplete_step is not None else 0
        return f"/wizard/{step}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "remaining_count": self.remaining_count,
            "remaining_step_ids": [r.step_id for r in self.remaining],
            "first_incomplete_step": self.first_incomplete_step,
            "label": self.label,
            "continue_path": self.continue_path,
        }


# Leading integer, like parseInt: "3", " 7 ", "1abc" and "+2" parse; "abc" does not
_STEP_NUMBER_RE = re.compile(r"\s*([+-]?\d+)")


def _parse_step_number(step_id: str) -> int | None:
    if not isinstance(step_id, str):
        return None
    match = _STEP_NUMBER_RE.match(step_id)
    return int(match.group(1)) if match else None


def project_setup(records: Iterable[WizardStepRecord]) -> SetupProjection | None:
    """
    Project wizard progress into the banner model.

    Returns None when every recorded step is complete (nothing to show).
    Non-numeric step ids still count as remaining work but are ignored when
    picking the first incomplete step.
    """
    remaining = [r for r in records if not r.completed]
    if not remaining:
        return None

    numbers = sorted(
        n for n in (_parse_step_number(r.step_id) for r in remaining) if n is not None
    )
    if not numbers:
        return SetupProjection(remaining=remaining)

    first = numbers[0]
    return SetupProjection(
        remaining=remaining,
        first_incomplete_step=first,
        label=step_label(first),
    )


# =============================================================================
# Database Access
# =============================================================================


def load_wizard_progress(client: Client, user_id: str) -> list[WizardStepRecord]:
    """Fetch all wizard_progress rows for a user. Store errors yield []."""
    try:
        result = (
            client.table("wizard_progress")
            .select("step_id, completed")
            .eq("user_id", user_id)
            .execute()
        )
    except Exception as e:
        logger.warning(f"Failed to load wizard progress for user {user_id}: {e}")
        return []

    rows = (result.data if result is not None else None) or []
    return [WizardStepRecord.from_row({**row, "user_id": user_id}) for row in rows]
