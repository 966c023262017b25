"""Wizard navigation and process capture request/response schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.schemas.process import CaptureState
from src.schemas.snapshot import (
    OnboardingSnapshot,
    ProcessAnalysis,
    ProcessPhase,
    ProjectType,
    ProjectTypeDetail,
)


class ValidationMessage(BaseModel):
    """A field-level validation message shown next to the input."""

    field: str = Field(description="Snapshot field the message refers to")
    message: str = Field(description="User-facing message (German)")

    def as_error_detail(self) -> dict[str, Any]:
        """Shape used in the error envelope's ``details`` list."""
        return {"loc": [self.field], "msg": self.message, "type": "value_error"}


class StepInfo(BaseModel):
    number: int
    key: str
    title: str


class WizardResponse(BaseModel):
    """Wizard state after an operation.

    ``ok`` is false when validation blocked the operation; the snapshot is
    then unchanged and ``messages`` says why.
    """

    ok: bool = True
    current_step: int
    total_steps: int
    step: StepInfo
    messages: list[ValidationMessage] = Field(default_factory=list)
    snapshot: dict[str, Any] = Field(description="Full snapshot with camelCase keys")

    @classmethod
    def build(
        cls,
        snapshot: OnboardingSnapshot,
        step: StepInfo,
        total_steps: int,
        messages: list[ValidationMessage] | None = None,
    ) -> "WizardResponse":
        return cls(
            ok=not messages,
            current_step=snapshot.current_step,
            total_steps=total_steps,
            step=step,
            messages=messages or [],
            snapshot=snapshot.model_dump(mode="json", by_alias=True),
        )


class GoToStepRequest(BaseModel):
    step: int = Field(description="Target step number (1-based)")


class StepValidationResponse(BaseModel):
    step: int
    valid: bool
    messages: list[ValidationMessage] = Field(default_factory=list)


# Process capture


class ConfirmSelectionRequest(BaseModel):
    """Phases and project types chosen on the selection screen."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    phase_ids: list[str] = Field(default_factory=list, description="Catalog or custom phase ids")
    project_type_ids: list[str] = Field(default_factory=list, description="Catalog or custom project type ids")


class CustomPhaseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Phase name")
    description: str = Field(default="", description="What happens in this phase")
    benefit: str = Field(default="", description="Expected benefit")


class CustomProjectTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Project type name")
    description: str = Field(default="", description="Typical work")
    icon: str = Field(default="📋", max_length=8, description="Display icon")


class CaptureDraft(BaseModel):
    """Answers for the item currently in focus.

    Phase analysis steps read the free-text fields and priority; project
    type steps read ``data``. Omitted fields keep their saved value.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_state: str | None = None
    pain_points: str | None = None
    desired_state: str | None = None
    priority: str | None = None
    data: dict[str, str] | None = None


class CaptureFocus(BaseModel):
    """The item being analyzed and its saved answers."""

    position: int = Field(description="1-based position across all analysis steps")
    total: int = Field(description="Number of analysis steps")
    phase: ProcessPhase | None = None
    analysis: ProcessAnalysis | None = None
    project_type: ProjectType | None = None
    detail: ProjectTypeDetail | None = None
    questions: list[dict[str, str]] = Field(default_factory=list)


class ProcessCaptureResponse(BaseModel):
    ok: bool = True
    state: CaptureState
    focus: CaptureFocus | None = None
    messages: list[ValidationMessage] = Field(default_factory=list)
    current_step: int = Field(description="Wizard step after the operation")
    custom_phases: list[ProcessPhase] = Field(default_factory=list)
    custom_project_types: list[ProjectType] = Field(default_factory=list)
    selected_processes: list[ProcessPhase] = Field(default_factory=list)
    selected_project_types: list[str] = Field(default_factory=list)
