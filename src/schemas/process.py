"""Process capture sub-flow states.

The sub-flow is always in exactly one of four states. Indices only exist
on the analysis states, so a selection screen can never carry a stale
index and a finished flow can never point into a list.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class Selecting(BaseModel):
    """Choosing phases and project types."""

    kind: Literal["selecting"] = "selecting"


class AnalyzingPhase(BaseModel):
    """Answering the analysis questions for ``selectedProcesses[index]``."""

    kind: Literal["analyzing_phase"] = "analyzing_phase"
    index: int = Field(ge=0)


class AnalyzingProjectType(BaseModel):
    """Answering the detail questions for ``selectedProjectTypes[index]``."""

    kind: Literal["analyzing_project_type"] = "analyzing_project_type"
    index: int = Field(ge=0)


class Done(BaseModel):
    """All analyses captured; the wizard has moved past step 3."""

    kind: Literal["done"] = "done"


CaptureState = Annotated[
    Union[Selecting, AnalyzingPhase, AnalyzingProjectType, Done],
    Field(discriminator="kind"),
]
