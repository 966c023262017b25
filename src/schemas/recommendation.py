"""Module recommendation schemas."""

from typing import Literal

from pydantic import BaseModel, Field

ModulePriority = Literal["essential", "recommended", "optional"]


class ModuleRecommendation(BaseModel):
    """One catalog module annotated with the derived recommendation flag."""

    id: str = Field(description="Module identifier")
    name: str = Field(description="Display name")
    description: str = Field(description="What the module covers")
    benefits: list[str] = Field(default_factory=list, description="Selling points")
    required_for: list[str] = Field(default_factory=list, description="Phase or project type ids the module serves")
    recommended: bool = Field(description="Catalog default or required by a selection")
    priority: ModulePriority = Field(description="Priority tier")


class RecommendationRequest(BaseModel):
    """Explicit selection to recommend for, independent of any session."""

    phase_ids: list[str] = Field(default_factory=list, description="Selected phase ids")
    project_type_ids: list[str] = Field(default_factory=list, description="Selected project type ids")


class RecommendationSummary(BaseModel):
    essential: int = 0
    recommended: int = 0
    optional: int = 0


class RecommendationResponse(BaseModel):
    modules: list[ModuleRecommendation]
    summary: RecommendationSummary
