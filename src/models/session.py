"""Onboarding session model type definitions for database operations."""

from datetime import datetime

from typing_extensions import TypedDict


class OnboardingSession(TypedDict):
    """onboarding_sessions table row representation.

    One client's run through the wizard. Sessions are never deleted; a
    session is complete once ``completed_at`` is set.
    """

    id: str
    client_name: str
    client_email: str | None
    client_phone: str | None
    current_step: int
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class OnboardingSessionCreate(TypedDict, total=False):
    """Data required to create a new session.

    Only client_name is required; current_step defaults to 1.
    """

    client_name: str
    client_email: str | None
    client_phone: str | None
    current_step: int


class OnboardingSessionUpdate(TypedDict, total=False):
    """Fields that change while the wizard runs."""

    current_step: int
    completed_at: datetime | None
