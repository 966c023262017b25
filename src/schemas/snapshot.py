"""Wizard snapshot schemas.

The snapshot is the complete serialized state of one onboarding session.
It is persisted as JSON with the camelCase field names the browser client
uses, so every model here serializes by alias.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.core.config import get_settings
from src.schemas.process import CaptureState, Selecting

TOTAL_STEPS = 11


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat explicit nulls like absent fields so defaults apply."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ProcessPhase(CamelModel):
    """A named stage in the client's sales workflow, from the catalog or custom."""

    id: str
    name: str
    description: str = ""
    benefit: str = ""
    icon: str = ""
    is_custom: bool = False


class ProjectStage(CamelModel):
    name: str
    description: str = ""


class ProjectType(CamelModel):
    """A category of deliverable work with its own sub-stages."""

    id: str
    name: str
    icon: str = "📋"
    description: str = ""
    stages: list[ProjectStage] = Field(default_factory=list)
    is_custom: bool = False


class ProcessAnalysis(CamelModel):
    """Free-text analysis of one selected phase.

    ``priority`` is kept as plain text so stored values outside
    low/medium/high survive a reload and export unchanged.
    """

    process_id: str
    current_state: str = ""
    pain_points: str = ""
    desired_state: str = ""
    priority: str = "medium"


class ProjectTypeDetail(CamelModel):
    """Answers to the per-project-type questions, keyed by question id."""

    type_id: str
    data: dict[str, str] = Field(default_factory=dict)


class Goal(CamelModel):
    goal_type: str = "short_term"
    title: str = ""
    description: str = ""
    priority: str = "medium"
    target_date: str | None = None


class CompanyValue(CamelModel):
    value_name: str = ""
    description: str = ""
    examples: str = ""
    importance: int = Field(default=5, ge=1, le=10)


class Automation(CamelModel):
    """A workflow automation template and whether the client wants it."""

    id: str
    category: str = ""
    name: str = ""
    description: str = ""
    trigger: str = ""
    action: str = ""
    enabled: bool = False
    config: dict[str, Any] = Field(default_factory=dict)


class Role(CamelModel):
    """A user role with per-module permission flags."""

    id: str
    name: str = ""
    count: int = Field(default=0, ge=0)
    permissions: dict[str, bool] = Field(default_factory=dict)


class Integration(CamelModel):
    id: str
    name: str = ""
    category: str = ""
    description: str = ""
    enabled: bool = False
    config: dict[str, str] = Field(default_factory=dict)


class GoLivePlan(CamelModel):
    """Rollout preferences.

    Enumerated fields stay plain strings; the exporter maps known values
    to labels and prints anything else raw.
    """

    timeline: str = "flexible"
    data_import: str = "yes"
    data_source: str = ""
    training_needs: str = "basic"
    training_format: str = "hybrid"
    pilot_users: int = 2
    pilot_duration: int = 2
    go_live_date: str = ""
    concerns: str = ""


def _default_company_name() -> str:
    return get_settings().default_company_name


class OnboardingSnapshot(CamelModel):
    """Everything captured for one session."""

    current_step: int = 1

    # Step 1: contact
    client_name: str = ""
    client_email: str = ""
    client_phone: str = ""

    # Step 2: company
    company_name: str = Field(default_factory=_default_company_name)
    industry: str = ""
    founded_year: str = ""
    number_of_employees: str = ""
    company_location: str = ""
    website: str = ""
    description: str = ""

    # Step 3: process capture
    custom_phases: list[ProcessPhase] = Field(default_factory=list)
    custom_project_types: list[ProjectType] = Field(default_factory=list)
    selected_processes: list[ProcessPhase] = Field(default_factory=list)
    selected_project_types: list[str] = Field(default_factory=list)
    process_analyses: list[ProcessAnalysis] = Field(default_factory=list)
    project_type_data: list[ProjectTypeDetail] = Field(default_factory=list)
    process_capture: CaptureState = Field(default_factory=Selecting)

    # Steps 4-10
    goals: list[Goal] = Field(default_factory=list)
    values: list[CompanyValue] = Field(default_factory=list)
    automations: list[Automation] = Field(default_factory=list)
    roles: list[Role] = Field(default_factory=list)
    integrations: list[Integration] = Field(default_factory=list)
    go_live_plan: GoLivePlan | None = None

    # Free text
    additional_notes: str = ""
    step_comments: dict[str, str] = Field(default_factory=dict)

    @field_validator("current_step")
    @classmethod
    def clamp_step(cls, value: int) -> int:
        return min(max(value, 1), TOTAL_STEPS)

    @field_validator("founded_year", "number_of_employees", mode="before")
    @classmethod
    def stringify_numbers(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("step_comments")
    @classmethod
    def drop_blank_comments(cls, value: dict[str, str]) -> dict[str, str]:
        return {step: text for step, text in value.items() if text}

    def to_json(self) -> str:
        """Serialize with the persisted camelCase keys."""
        return self.model_dump_json(by_alias=True)

    def phase_ids(self) -> list[str]:
        return [phase.id for phase in self.selected_processes]


class SnapshotUpdate(CamelModel):
    """Field edits sent while a step is open.

    Step pointer and process-capture data are excluded; they change only
    through navigation and the capture sub-flow.
    """

    client_name: str | None = None
    client_email: str | None = None
    client_phone: str | None = None
    company_name: str | None = None
    industry: str | None = None
    founded_year: str | None = None
    number_of_employees: str | None = None
    company_location: str | None = None
    website: str | None = None
    description: str | None = None
    goals: list[Goal] | None = None
    values: list[CompanyValue] | None = None
    automations: list[Automation] | None = None
    roles: list[Role] | None = None
    integrations: list[Integration] | None = None
    go_live_plan: GoLivePlan | None = None
    additional_notes: str | None = None
    step_comments: dict[str, str] | None = None

    @field_validator("founded_year", "number_of_employees", mode="before")
    @classmethod
    def stringify_numbers(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def changes(self) -> dict[str, Any]:
        """Fields explicitly set, keyed by attribute name."""
        return {name: getattr(self, name) for name in self.model_fields_set}
