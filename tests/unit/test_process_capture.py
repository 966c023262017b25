"""Unit tests for the process capture sub-flow."""

from unittest.mock import patch

import pytest

from src.schemas.process import AnalyzingPhase, AnalyzingProjectType, Done, Selecting
from src.schemas.snapshot import OnboardingSnapshot
from src.schemas.wizard import CaptureDraft
from src.services.process_capture import (
    EMPTY_CURRENT_STATE_MESSAGE,
    EMPTY_SELECTION_MESSAGE,
    ProcessCapture,
    ProcessCaptureStateError,
)


@pytest.fixture
def capture() -> ProcessCapture:
    return ProcessCapture(OnboardingSnapshot())


class TestConfirm:
    """Tests for confirming the selection."""

    def test_empty_selection_is_rejected(self, capture: ProcessCapture) -> None:
        messages = capture.confirm([], [])

        assert [m.message for m in messages] == [EMPTY_SELECTION_MESSAGE]
        assert isinstance(capture.state, Selecting)

    def test_unknown_ids_are_rejected(self, capture: ProcessCapture) -> None:
        messages = capture.confirm(["lead", "bogus"], ["nope"])

        assert [m.message for m in messages] == [
            "Unbekannte CRM-Phase: bogus",
            "Unbekannter Projekttyp: nope",
        ]
        assert capture.snapshot.selected_processes == []

    def test_phases_follow_catalog_order(self, capture: ProcessCapture) -> None:
        capture.confirm(["quote", "lead"], [])

        assert capture.snapshot.phase_ids() == ["lead", "quote"]
        assert [a.process_id for a in capture.snapshot.process_analyses] == ["lead", "quote"]
        assert capture.state == AnalyzingPhase(index=0)

    def test_project_types_only_start_in_project_region(self, capture: ProcessCapture) -> None:
        capture.confirm([], ["heizung", "sanitaer", "heizung"])

        assert capture.snapshot.selected_project_types == ["heizung", "sanitaer"]
        assert capture.state == AnalyzingProjectType(index=0)

    def test_existing_drafts_are_kept(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead"], [])
        capture.save_draft(CaptureDraft(current_state="Telefon und Zettel"))
        capture.reset()

        capture.confirm(["lead", "won"], [])

        assert capture.snapshot.process_analyses[0].current_state == "Telefon und Zettel"
        assert capture.snapshot.process_analyses[1].current_state == ""

    def test_confirm_outside_selection_raises(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead"], [])

        with pytest.raises(ProcessCaptureStateError):
            capture.confirm(["lead"], [])


class TestCustomEntries:
    """Tests for user-defined phases and project types."""

    def test_custom_phase_is_selectable_after_catalog_phases(self, capture: ProcessCapture) -> None:
        phase = capture.add_custom_phase("Wartungsvertrag", "Jährliche Wartung")

        capture.confirm([phase.id, "lead"], [])

        assert phase.id.startswith("custom-crm-")
        assert phase.is_custom
        assert capture.snapshot.phase_ids() == ["lead", phase.id]

    def test_custom_ids_do_not_collide(self, capture: ProcessCapture) -> None:
        with patch("src.services.process_capture.time.time", return_value=1700000000.0):
            first = capture.add_custom_phase("A")
            second = capture.add_custom_phase("B")

        assert first.id == "custom-crm-1700000000000"
        assert second.id == "custom-crm-1700000000001"

    def test_custom_project_type_gets_generic_stages(self, capture: ProcessCapture) -> None:
        project_type = capture.add_custom_project_type("Solar")

        assert project_type.id.startswith("custom-project-")
        assert project_type.stages

    def test_adding_outside_selection_raises(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead"], [])

        with pytest.raises(ProcessCaptureStateError):
            capture.add_custom_phase("Zu spät")


class TestAnalysis:
    """Tests for moving through the analysis pages."""

    def test_two_phases_need_exactly_two_steps(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead", "quote"], [])

        first = capture.next(CaptureDraft(current_state="Anrufe"))
        assert not first.finished
        assert capture.state == AnalyzingPhase(index=1)

        second = capture.next(CaptureDraft(current_state="Word-Vorlagen"))
        assert second.finished
        assert isinstance(capture.state, Done)
        assert [(p.id, a.current_state) for p, a in second.result.phases] == [
            ("lead", "Anrufe"),
            ("quote", "Word-Vorlagen"),
        ]

    def test_empty_current_state_is_rejected(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead", "quote"], [])

        outcome = capture.next(CaptureDraft(current_state="   ", pain_points="Zu viel Papier"))

        assert [m.message for m in outcome.messages] == [EMPTY_CURRENT_STATE_MESSAGE]
        assert capture.state == AnalyzingPhase(index=0)
        # the draft was still saved
        assert capture.snapshot.process_analyses[0].pain_points == "Zu viel Papier"

    def test_phase_region_hands_over_to_project_types(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead"], ["sanitaer"])

        capture.next(CaptureDraft(current_state="manuell"))
        assert capture.state == AnalyzingProjectType(index=0)

        outcome = capture.next(CaptureDraft(data={"duration": "2 Wochen"}))
        assert outcome.finished
        project_type, detail = outcome.result.project_types[0]
        assert project_type.id == "sanitaer"
        assert detail.data == {"duration": "2 Wochen"}

    def test_project_type_pages_never_block(self, capture: ProcessCapture) -> None:
        capture.confirm([], ["sanitaer", "heizung"])

        assert capture.next().messages == []
        assert capture.next().finished

    def test_previous_walks_back_across_regions(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead", "quote"], ["sanitaer"])
        capture.next(CaptureDraft(current_state="a"))
        capture.next(CaptureDraft(current_state="b"))
        assert capture.state == AnalyzingProjectType(index=0)

        capture.previous()
        assert capture.state == AnalyzingPhase(index=1)
        capture.previous()
        assert capture.state == AnalyzingPhase(index=0)
        capture.previous()
        assert isinstance(capture.state, Selecting)

    def test_previous_from_first_project_type_without_phases(self, capture: ProcessCapture) -> None:
        capture.confirm([], ["sanitaer"])

        capture.previous()

        assert isinstance(capture.state, Selecting)

    def test_next_while_selecting_raises(self, capture: ProcessCapture) -> None:
        with pytest.raises(ProcessCaptureStateError) as exc_info:
            capture.next()

        assert exc_info.value.state == "selecting"

    def test_focus_reports_position(self, capture: ProcessCapture) -> None:
        capture.confirm(["lead"], ["heizung"])
        capture.next(CaptureDraft(current_state="x"))

        focus = capture.focus()

        assert focus.position == 2
        assert focus.total == 2
        assert focus.project_type.id == "heizung"
        assert focus.questions
