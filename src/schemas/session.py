"""Onboarding session Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SessionCreate(BaseModel):
    """Schema for starting an onboarding run (wizard step 1)."""

    client_name: str = Field(..., min_length=1, max_length=255, description="Contact person's name")
    client_email: EmailStr | None = Field(default=None, description="Contact email")
    client_phone: str | None = Field(default=None, max_length=50, description="Contact phone number")


class SessionUpdate(BaseModel):
    """Fields that change while the wizard runs."""

    current_step: int | None = Field(default=None, ge=1, le=11, description="Current wizard step")
    completed_at: datetime | None = Field(default=None, description="Set once the submission succeeded")


class SessionResponse(BaseModel):
    """Schema for session API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Session identifier")
    client_name: str = Field(description="Contact person's name")
    client_email: str | None = Field(default=None, description="Contact email")
    client_phone: str | None = Field(default=None, description="Contact phone number")
    current_step: int = Field(description="Current wizard step")
    completed_at: datetime | None = Field(default=None, description="Completion timestamp")
    created_at: datetime | None = Field(default=None, description="Session creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
