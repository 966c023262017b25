"""Company profile Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CompanyInfoUpsert(BaseModel):
    """Schema for creating or replacing a session's company profile."""

    company_name: str = Field(..., min_length=1, max_length=255, description="Company name")
    industry: str | None = Field(default=None, max_length=100, description="Industry")
    founded_year: int | None = Field(default=None, ge=1800, le=2100, description="Year founded")
    number_of_employees: int | None = Field(default=None, ge=0, description="Headcount")
    location: str | None = Field(default=None, max_length=255, description="Location")
    website: str | None = Field(default=None, max_length=500, description="Website URL")
    description: str | None = Field(default=None, description="Free-text description")


class CompanyInfoResponse(BaseModel):
    """Schema for company profile API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Record identifier")
    session_id: str = Field(description="Owning session")
    company_name: str = Field(description="Company name")
    industry: str | None = None
    founded_year: int | None = None
    number_of_employees: int | None = None
    location: str | None = None
    website: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
