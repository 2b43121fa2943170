"""
Tests for the wizard step table and setup-completeness projection.
"""

import pytest

from northstar.wizard.progress import WizardStepRecord, load_wizard_progress, project_setup
from northstar.wizard.steps import STEP_LABELS, TOTAL_STEPS, WIZARD_STEPS, get_step, step_label

from conftest import FakeSupabase


def records(*pairs) -> list[WizardStepRecord]:
    return [WizardStepRecord(step_id=step_id, completed=done) for step_id, done in pairs]


class TestStepTable:
    def test_fourteen_tracked_labels(self):
        assert sorted(STEP_LABELS, key=int) == [str(n) for n in range(14)]

    def test_banner_labels(self):
        assert STEP_LABELS["0"] == "Welcome & Baseline"
        assert STEP_LABELS["1"] == "Brain Dump"
        assert STEP_LABELS["10"] == "WOOP & If-Then"
        assert STEP_LABELS["13"] == "Preferences"

    def test_finish_is_a_page_but_not_tracked(self):
        assert TOTAL_STEPS == 15
        assert WIZARD_STEPS[-1].title == "Finish"
        assert "14" not in STEP_LABELS

    def test_steps_are_in_numeric_order(self):
        assert [step.number for step in WIZARD_STEPS] == list(range(TOTAL_STEPS))

    def test_unknown_step_label(self):
        assert step_label(42) == "Step 42"
        assert step_label(14) == "Step 14"

    @pytest.mark.parametrize("number", [-1, 15, 99])
    def test_get_step_out_of_range(self, number):
        assert get_step(number) is None


class TestProjectSetup:
    """Banner projection over wizard_progress rows."""

    def test_first_incomplete_step(self):
        projection = project_setup(records(("0", True), ("1", False), ("3", False), ("2", True)))
        assert projection is not None
        assert projection.remaining_count == 2
        assert projection.first_incomplete_step == 1
        assert projection.label == "Brain Dump"
        assert projection.continue_path == "/wizard/1"

    def test_all_completed_shows_nothing(self):
        assert project_setup(records(("0", True), ("1", True))) is None

    def test_no_records_shows_nothing(self):
        assert project_setup([]) is None

    def test_numeric_not_lexical_ordering(self):
        projection = project_setup(records(("10", False), ("9", False), ("2", True)))
        assert projection.first_incomplete_step == 9
        assert projection.label == "Projects"

    def test_non_numeric_ids_count_but_do_not_order(self):
        projection = project_setup(records(("intro", False), ("5", False)))
        assert projection.remaining_count == 2
        assert projection.first_incomplete_step == 5
        assert projection.label == "Life Domains"

    def test_leading_digits_order_like_parse_int(self):
        projection = project_setup(records(("1abc", False), ("4", False)))
        assert projection.remaining_count == 2
        assert projection.first_incomplete_step == 1
        assert projection.label == "Brain Dump"

    def test_only_non_numeric_ids(self):
        projection = project_setup(records(("intro", False)))
        assert projection.remaining_count == 1
        assert projection.first_incomplete_step is None
        assert projection.label == "setup"
        assert projection.continue_path == "/wizard/0"

    def test_out_of_range_step_gets_synthesized_label(self):
        projection = project_setup(records(("20", False)))
        assert projection.label == "Step 20"

    def test_to_dict(self):
        data = project_setup(records(("3", False), ("x", False))).to_dict()
        assert data == {
            "remaining_count": 2,
            "remaining_step_ids": ["3", "x"],
            "first_incomplete_step": 3,
            "label": "Identity",
            "continue_path": "/wizard/3",
        }


class TestLoadWizardProgress:
    def test_reads_user_rows(self):
        db = FakeSupabase(tables={"wizard_progress": [
            {"user_id": "user-1", "step_id": "0", "completed": True},
            {"user_id": "user-1", "step_id": "1", "completed": False},
            {"user_id": "user-2", "step_id": "0", "completed": False},
        ]})
        rows = load_wizard_progress(db, "user-1")
        assert [(r.step_id, r.completed) for r in rows] == [("0", True), ("1", False)]
        assert all(r.user_id == "user-1" for r in rows)

    def test_store_error_is_empty(self):
        db = FakeSupabase(errors={"wizard_progress": RuntimeError("timeout")})
        assert load_wizard_progress(db, "user-1") == []

    def test_numeric_step_ids_are_strings(self):
        db = FakeSupabase(tables={"wizard_progress": [{"user_id": "u", "step_id": 4, "completed": False}]})
        assert load_wizard_progress(db, "u")[0].step_id == "4"
