"""Company profile model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict


class CompanyInfo(TypedDict):
    """company_info table row representation.

    1:1 with an onboarding session.
    """

    id: str
    session_id: str
    company_name: str
    industry: str | None
    founded_year: int | None
    number_of_employees: int | None
    location: str | None
    website: str | None
    description: str | None
    created_at: datetime
    updated_at: datetime
