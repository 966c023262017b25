"""Process capture sub-flow for wizard step 3.

The client first selects sales phases and project types, then answers
one analysis page per selected phase, then one detail page per selected
project type. The flow state lives in the snapshot (``processCapture``)
but the flow never persists anything itself; the wizard controller saves
the snapshot after each operation.
"""

import logging
import time
from dataclasses import dataclass, field

from src.schemas.process import (
    AnalyzingPhase,
    AnalyzingProjectType,
    Done,
    Selecting,
)
from src.schemas.snapshot import (
    OnboardingSnapshot,
    ProcessAnalysis,
    ProcessPhase,
    ProjectStage,
    ProjectType,
    ProjectTypeDetail,
)
from src.schemas.wizard import CaptureDraft, CaptureFocus, ValidationMessage
from src.services.catalogs import (
    CRM_PHASES,
    CUSTOM_PHASE_ICON,
    CUSTOM_PROJECT_STAGES,
    PHASE_BY_ID,
    PROJECT_TYPE_BY_ID,
    questions_for_project_type,
)

logger = logging.getLogger(__name__)

EMPTY_SELECTION_MESSAGE = "Bitte wählen Sie mindestens eine CRM-Phase oder einen Projekttyp aus"
EMPTY_CURRENT_STATE_MESSAGE = "Bitte beschreiben Sie den aktuellen Zustand dieser Phase"


class ProcessCaptureStateError(Exception):
    """The operation is not available in the current sub-flow state."""

    def __init__(self, operation: str, state: str) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"'{operation}' is not allowed while process capture is '{state}'")


@dataclass
class CaptureResult:
    """Ordered pairs emitted when the sub-flow finishes."""

    phases: list[tuple[ProcessPhase, ProcessAnalysis]] = field(default_factory=list)
    project_types: list[tuple[ProjectType, ProjectTypeDetail]] = field(default_factory=list)


@dataclass
class CaptureStep:
    """Outcome of ``next``: validation messages, or the finished result."""

    messages: list[ValidationMessage] = field(default_factory=list)
    result: CaptureResult | None = None

    @property
    def finished(self) -> bool:
        return self.result is not None


def _timestamp_id(prefix: str, taken: set[str]) -> str:
    stamp = int(time.time() * 1000)
    candidate = f"{prefix}-{stamp}"
    while candidate in taken:
        stamp += 1
        candidate = f"{prefix}-{stamp}"
    return candidate


class ProcessCapture:
    """State machine over one snapshot's process capture fields."""

    def __init__(self, snapshot: OnboardingSnapshot) -> None:
        self.snapshot = snapshot

    @property
    def state(self):
        return self.snapshot.process_capture

    def _require(self, operation: str, *kinds: type) -> None:
        if not isinstance(self.state, kinds):
            raise ProcessCaptureStateError(operation, self.state.kind)

    # Selection

    def add_custom_phase(self, name: str, description: str = "", benefit: str = "") -> ProcessPhase:
        """Create a user-defined phase. It is selectable like catalog phases."""
        self._require("add_custom_phase", Selecting)
        taken = {phase.id for phase in self.snapshot.custom_phases}
        phase = ProcessPhase(
            id=_timestamp_id("custom-crm", taken),
            name=name.strip(),
            description=description.strip(),
            benefit=benefit.strip(),
            icon=CUSTOM_PHASE_ICON,
            is_custom=True,
        )
        self.snapshot.custom_phases.append(phase)
        return phase

    def add_custom_project_type(self, name: str, description: str = "", icon: str = "📋") -> ProjectType:
        """Create a user-defined project type with the generic stages."""
        self._require("add_custom_project_type", Selecting)
        taken = {project.id for project in self.snapshot.custom_project_types}
        project_type = ProjectType(
            id=_timestamp_id("custom-project", taken),
            name=name.strip(),
            icon=icon or "📋",
            description=description.strip(),
            stages=[ProjectStage(**stage) for stage in CUSTOM_PROJECT_STAGES],
            is_custom=True,
        )
        self.snapshot.custom_project_types.append(project_type)
        return project_type

    def _resolve_phases(self, phase_ids: list[str]) -> tuple[list[ProcessPhase], list[str]]:
        wanted = set(phase_ids)
        custom_by_id = {phase.id: phase for phase in self.snapshot.custom_phases}
        unknown = [pid for pid in dict.fromkeys(phase_ids) if pid not in PHASE_BY_ID and pid not in custom_by_id]

        # Catalog phases in catalog order, then custom phases in creation order
        phases = [ProcessPhase(**entry) for entry in CRM_PHASES if entry["id"] in wanted]
        phases.extend(phase for phase in self.snapshot.custom_phases if phase.id in wanted)
        return phases, unknown

    def _project_type(self, type_id: str) -> ProjectType | None:
        if type_id in PROJECT_TYPE_BY_ID:
            return ProjectType(**PROJECT_TYPE_BY_ID[type_id])
        return next((p for p in self.snapshot.custom_project_types if p.id == type_id), None)

    def confirm(self, phase_ids: list[str], project_type_ids: list[str]) -> list[ValidationMessage]:
        """Accept the selection and open the first analysis page.

        Drafts already captured for a phase or project type that stays
        selected are kept; every other selected item starts blank.

        Returns:
            list[ValidationMessage]: Empty when the selection was accepted.
        """
        self._require("confirm", Selecting)

        if not phase_ids and not project_type_ids:
            return [ValidationMessage(field="selectedProcesses", message=EMPTY_SELECTION_MESSAGE)]

        phases, unknown_phases = self._resolve_phases(phase_ids)
        type_ids = list(dict.fromkeys(project_type_ids))
        unknown_types = [tid for tid in type_ids if self._project_type(tid) is None]

        messages = [
            ValidationMessage(field="selectedProcesses", message=f"Unbekannte CRM-Phase: {pid}")
            for pid in unknown_phases
        ]
        messages.extend(
            ValidationMessage(field="selectedProjectTypes", message=f"Unbekannter Projekttyp: {tid}")
            for tid in unknown_types
        )
        if messages:
            return messages

        existing_analyses = {a.process_id: a for a in self.snapshot.process_analyses}
        existing_details = {d.type_id: d for d in self.snapshot.project_type_data}

        self.snapshot.selected_processes = phases
        self.snapshot.selected_project_types = type_ids
        self.snapshot.process_analyses = [
            existing_analyses.get(phase.id) or ProcessAnalysis(process_id=phase.id, priority="medium")
            for phase in phases
        ]
        self.snapshot.project_type_data = [
            existing_details.get(tid) or ProjectTypeDetail(type_id=tid) for tid in type_ids
        ]
        self.snapshot.process_capture = AnalyzingPhase(index=0) if phases else AnalyzingProjectType(index=0)
        logger.debug(
            "Process selection confirmed: %d phases, %d project types",
            len(phases),
            len(type_ids),
        )
        return []

    # Analysis

    def _apply_draft(self, draft: CaptureDraft) -> None:
        state = self.state
        if isinstance(state, AnalyzingPhase):
            analysis = self.snapshot.process_analyses[state.index]
            for name in ("current_state", "pain_points", "desired_state", "priority"):
                value = getattr(draft, name)
                if value is not None:
                    setattr(analysis, name, value)
        elif isinstance(state, AnalyzingProjectType) and draft.data is not None:
            detail = self.snapshot.project_type_data[state.index]
            detail.data = {**detail.data, **draft.data}

    def save_draft(self, draft: CaptureDraft) -> None:
        """Store answers for the current page without moving."""
        self._require("save_draft", AnalyzingPhase, AnalyzingProjectType)
        self._apply_draft(draft)

    def next(self, draft: CaptureDraft | None = None) -> CaptureStep:
        """Save the draft, validate the page and move forward.

        A phase page needs a non-empty current-state text. Project type
        pages never block. Leaving the last page finishes the flow.
        """
        self._require("next", AnalyzingPhase, AnalyzingProjectType)
        if draft is not None:
            self._apply_draft(draft)

        state = self.state
        phase_count = len(self.snapshot.selected_processes)
        type_count = len(self.snapshot.selected_project_types)

        if isinstance(state, AnalyzingPhase):
            analysis = self.snapshot.process_analyses[state.index]
            if not analysis.current_state.strip():
                return CaptureStep(
                    messages=[ValidationMessage(field="currentState", message=EMPTY_CURRENT_STATE_MESSAGE)]
                )
            if state.index + 1 < phase_count:
                self.snapshot.process_capture = AnalyzingPhase(index=state.index + 1)
                return CaptureStep()
            if type_count:
                self.snapshot.process_capture = AnalyzingProjectType(index=0)
                return CaptureStep()
        elif state.index + 1 < type_count:
            self.snapshot.process_capture = AnalyzingProjectType(index=state.index + 1)
            return CaptureStep()

        self.snapshot.process_capture = Done()
        return CaptureStep(result=self.results())

    def previous(self) -> None:
        """Move back one page.

        Before the first project type page comes the last phase page;
        before the first phase page comes the selection screen.
        """
        self._require("previous", AnalyzingPhase, AnalyzingProjectType)
        state = self.state

        if state.index > 0:
            self.snapshot.process_capture = type(state)(index=state.index - 1)
        elif isinstance(state, AnalyzingProjectType) and self.snapshot.selected_processes:
            self.snapshot.process_capture = AnalyzingPhase(index=len(self.snapshot.selected_processes) - 1)
        else:
            self.snapshot.process_capture = Selecting()

    def reset(self) -> None:
        """Return to the selection screen, keeping selection and drafts."""
        self.snapshot.process_capture = Selecting()

    # Output

    def results(self) -> CaptureResult:
        """Ordered (phase, analysis) and (project type, detail) pairs."""
        result = CaptureResult(phases=list(zip(self.snapshot.selected_processes, self.snapshot.process_analyses)))
        for detail in self.snapshot.project_type_data:
            project_type = self._project_type(detail.type_id)
            if project_type is None:
                project_type = ProjectType(id=detail.type_id, name=detail.type_id)
            result.project_types.append((project_type, detail))
        return result

    def focus(self) -> CaptureFocus | None:
        """The page currently shown, or None outside the analysis regions."""
        state = self.state
        phase_count = len(self.snapshot.selected_processes)
        total = phase_count + len(self.snapshot.selected_project_types)

        if isinstance(state, AnalyzingPhase):
            return CaptureFocus(
                position=state.index + 1,
                total=total,
                phase=self.snapshot.selected_processes[state.index],
                analysis=self.snapshot.process_analyses[state.index],
            )
        if isinstance(state, AnalyzingProjectType):
            detail = self.snapshot.project_type_data[state.index]
            return CaptureFocus(
                position=phase_count + state.index + 1,
                total=total,
                project_type=self._project_type(detail.type_id),
                detail=detail,
                questions=questions_for_project_type(detail.type_id),
            )
        return None
