"""Wizard controller: step sequencing, validation and snapshot persistence.

The controller owns one session's snapshot. Every successful navigation
or edit writes the whole snapshot to the keyed store under
``{snapshot_key_prefix}:{session_id}``; loading restores it. Validation
problems come back as ``ValidationMessage`` lists and only ever block
forward movement.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from src.core.config import get_settings
from src.core.store import KeyValueStore, get_key_value_store
from src.schemas.process import AnalyzingPhase, AnalyzingProjectType, Done, Selecting
from src.schemas.snapshot import TOTAL_STEPS, OnboardingSnapshot
from src.schemas.wizard import CaptureDraft, StepInfo, ValidationMessage
from src.services.process_capture import CaptureResult, CaptureStep, ProcessCapture, ProcessCaptureStateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WizardStep:
    number: int
    key: str
    title: str

    def info(self) -> StepInfo:
        return StepInfo(number=self.number, key=self.key, title=self.title)


STEPS: tuple[WizardStep, ...] = (
    WizardStep(1, "client_info", "Kundeninformationen"),
    WizardStep(2, "company_profile", "Firmeninformationen"),
    WizardStep(3, "process_capture", "CRM-Phasen & Projekttypen"),
    WizardStep(4, "goals", "Ziele & Wünsche"),
    WizardStep(5, "values", "Unternehmenswerte"),
    WizardStep(6, "module_recommendation", "Odoo-Module"),
    WizardStep(7, "automations", "Workflow-Automatisierungen"),
    WizardStep(8, "roles", "Rollen & Berechtigungen"),
    WizardStep(9, "integrations", "Integrationen"),
    WizardStep(10, "go_live", "Go-Live Planung"),
    WizardStep(11, "review", "Zusammenfassung"),
)

PROCESS_CAPTURE_STEP = 3
GOALS_STEP = 4

CLIENT_NAME_MESSAGE = "Bitte geben Sie Ihren Namen ein"
COMPANY_NAME_MESSAGE = "Bitte geben Sie den Firmennamen ein"
CAPTURE_UNFINISHED_MESSAGE = "Bitte schließen Sie die Prozessanalyse ab"
GOAL_TITLE_MESSAGE = "Bitte geben Sie für alle Ziele einen Titel ein"
VALUE_NAME_MESSAGE = "Bitte geben Sie für alle Werte einen Namen ein"
LAST_STEP_MESSAGE = "Sie befinden sich bereits im letzten Schritt"


class CaptureClosedError(ProcessCaptureStateError):
    """A process capture change was attempted outside its wizard step."""

    def __init__(self, operation: str, current_step: int) -> None:
        self.current_step = current_step
        super().__init__(operation, f"closed on step {current_step}")


def snapshot_key(session_id: str) -> str:
    """Store key holding a session's snapshot."""
    return f"{get_settings().snapshot_key_prefix}:{session_id}"


def step_info(number: int) -> StepInfo:
    return STEPS[number - 1].info()


def validate_snapshot_step(snapshot: OnboardingSnapshot, number: int) -> list[ValidationMessage]:
    """Field-level problems that keep the user from leaving step ``number``."""
    if number == 1 and not snapshot.client_name.strip():
        return [ValidationMessage(field="clientName", message=CLIENT_NAME_MESSAGE)]
    if number == 2 and not snapshot.company_name.strip():
        return [ValidationMessage(field="companyName", message=COMPANY_NAME_MESSAGE)]
    if number == PROCESS_CAPTURE_STEP and not isinstance(snapshot.process_capture, Done):
        return [ValidationMessage(field="processCapture", message=CAPTURE_UNFINISHED_MESSAGE)]
    if number == 4:
        return [
            ValidationMessage(field=f"goals.{i}.title", message=GOAL_TITLE_MESSAGE)
            for i, goal in enumerate(snapshot.goals)
            if not goal.title.strip()
        ]
    if number == 5:
        return [
            ValidationMessage(field=f"values.{i}.valueName", message=VALUE_NAME_MESSAGE)
            for i, value in enumerate(snapshot.values)
            if not value.value_name.strip()
        ]
    return []


def _normalize_capture(snapshot: OnboardingSnapshot) -> None:
    """Drop a capture state whose index no longer points into its list."""
    state = snapshot.process_capture
    phase_count = len(snapshot.selected_processes)
    type_count = len(snapshot.selected_project_types)
    broken = (
        isinstance(state, AnalyzingPhase)
        and (state.index >= phase_count or len(snapshot.process_analyses) != phase_count)
    ) or (
        isinstance(state, AnalyzingProjectType)
        and (state.index >= type_count or len(snapshot.project_type_data) != type_count)
    )
    if broken:
        logger.warning("Resetting inconsistent process capture state %s", state.kind)
        snapshot.process_capture = Selecting()


class WizardController:
    """Step pointer plus captured fields for one session."""

    def __init__(
        self,
        session_id: str,
        store: KeyValueStore,
        snapshot: OnboardingSnapshot | None = None,
    ) -> None:
        self.session_id = session_id
        self.store = store
        self._snapshot = snapshot or OnboardingSnapshot()
        self.capture = ProcessCapture(self._snapshot)

    @classmethod
    def load(cls, session_id: str, store: KeyValueStore) -> "WizardController":
        """Restore the last saved snapshot, or start fresh.

        Unreadable data is logged and treated as no data.
        """
        raw = store.get(snapshot_key(session_id))
        if raw is None:
            return cls(session_id, store)

        try:
            snapshot = OnboardingSnapshot.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Ignoring unreadable snapshot for session %s: %s",
                session_id,
                e.errors(include_url=False)[:3],
            )
            return cls(session_id, store)

        _normalize_capture(snapshot)
        return cls(session_id, store, snapshot)

    @property
    def current_step(self) -> int:
        return self._snapshot.current_step

    @property
    def total_steps(self) -> int:
        return TOTAL_STEPS

    def snapshot(self) -> OnboardingSnapshot:
        return self._snapshot

    def save(self) -> None:
        self.store.set(snapshot_key(self.session_id), self._snapshot.to_json())

    def clear(self) -> None:
        """Remove the persisted snapshot. The in-memory copy is kept."""
        self.store.remove(snapshot_key(self.session_id))

    # Validation

    def validate_step(self, number: int) -> list[ValidationMessage]:
        if not 1 <= number <= TOTAL_STEPS:
            return [ValidationMessage(field="currentStep", message=f"Schritt {number} existiert nicht")]
        return validate_snapshot_step(self._snapshot, number)

    def validate_all(self) -> list[ValidationMessage]:
        messages: list[ValidationMessage] = []
        for step in STEPS:
            messages.extend(self.validate_step(step.number))
        return messages

    # Navigation

    def advance(self) -> list[ValidationMessage]:
        """Move forward one step if the current step validates."""
        if self.current_step >= TOTAL_STEPS:
            return [ValidationMessage(field="currentStep", message=LAST_STEP_MESSAGE)]

        messages = self.validate_step(self.current_step)
        if messages:
            return messages

        self._snapshot.current_step += 1
        self.save()
        return []

    def retreat(self) -> None:
        """Move back one step. Never blocked; a no-op on step 1."""
        if self.current_step <= 1:
            return
        self._snapshot.current_step -= 1
        self.save()

    def go_to_step(self, number: int) -> list[ValidationMessage]:
        """Jump to a step.

        Backward jumps are always allowed. Forward jumps need every step
        from the current one up to the one before the target to validate.
        """
        if not 1 <= number <= TOTAL_STEPS:
            return [ValidationMessage(field="currentStep", message=f"Schritt {number} existiert nicht")]

        if number > self.current_step:
            messages: list[ValidationMessage] = []
            for step in range(self.current_step, number):
                messages.extend(self.validate_step(step))
            if messages:
                return messages

        if number != self.current_step:
            self._snapshot.current_step = number
            self.save()
        return []

    # Edits

    def update(self, changes: dict[str, Any]) -> None:
        """Apply field edits (attribute names) and persist."""
        for name, value in changes.items():
            if name not in OnboardingSnapshot.model_fields or name in ("current_step", "process_capture"):
                raise ValueError(f"Field cannot be edited directly: {name}")
            setattr(self._snapshot, name, value)
        self.save()

    # Process capture

    def open_capture(self, operation: str) -> ProcessCapture:
        """The sub-flow, for an operation that changes it.

        Raises:
            CaptureClosedError: The wizard is not on the process capture step.
        """
        if self.current_step != PROCESS_CAPTURE_STEP:
            raise CaptureClosedError(operation, self.current_step)
        return self.capture

    def complete_capture(self, result: CaptureResult) -> None:
        """Store the emitted pairs and hand control back to the main flow."""
        self._snapshot.process_analyses = [analysis for _, analysis in result.phases]
        self._snapshot.project_type_data = [detail for _, detail in result.project_types]
        if self.current_step == PROCESS_CAPTURE_STEP:
            self._snapshot.current_step = GOALS_STEP

    def capture_next(self, draft: CaptureDraft | None) -> CaptureStep:
        outcome = self.open_capture("next").next(draft)
        if outcome.finished:
            self.complete_capture(outcome.result)
            logger.info("Process capture finished for session %s", self.session_id)
        self.save()
        return outcome


class WizardService:
    """Async facade the API uses to drive a session's wizard."""

    def __init__(self, store: KeyValueStore | None = None) -> None:
        self.store = store or get_key_value_store()

    async def load(self, session_id: str) -> WizardController:
        return WizardController.load(session_id, self.store)

    async def start(self, session_id: str, client_name: str, client_email: str = "", client_phone: str = "") -> WizardController:
        """Seed a new session's snapshot with the contact details."""
        controller = await self.load(session_id)
        controller.update(
            {
                "client_name": client_name,
                "client_email": client_email or "",
                "client_phone": client_phone or "",
            }
        )
        return controller

    async def clear(self, session_id: str) -> None:
        self.store.remove(snapshot_key(session_id))
