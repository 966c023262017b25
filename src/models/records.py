"""Row definitions for the per-session questionnaire tables."""

from datetime import datetime
from typing import Literal, TypedDict

Priority = Literal["low", "medium", "high"]
GoalType = Literal["short_term", "long_term", "vision"]


class BusinessProcess(TypedDict, total=False):
    """business_processes table row."""

    id: str
    session_id: str
    process_name: str
    category: str | None
    description: str | None
    current_state: str | None
    pain_points: str | None
    desired_state: str | None
    priority: Priority
    created_at: datetime


class GoalAndWish(TypedDict, total=False):
    """goals_and_wishes table row."""

    id: str
    session_id: str
    goal_type: GoalType
    title: str
    description: str | None
    target_date: datetime | None
    priority: Priority
    created_at: datetime


class CompanyValue(TypedDict, total=False):
    """company_values table row."""

    id: str
    session_id: str
    value_name: str
    description: str | None
    examples: str | None
    importance: int
    created_at: datetime


class Product(TypedDict, total=False):
    """products table row."""

    id: str
    session_id: str
    product_name: str
    category: str | None
    description: str | None
    unit_price: int | None
    unit: str | None
    is_service: bool
    created_at: datetime


class Supplier(TypedDict, total=False):
    """suppliers table row."""

    id: str
    session_id: str
    supplier_name: str
    contact_person: str | None
    email: str | None
    phone: str | None
    products: str | None
    payment_terms: str | None
    created_at: datetime


class TeamMember(TypedDict, total=False):
    """team_members table row."""

    id: str
    session_id: str
    member_name: str
    role: str | None
    responsibilities: str | None
    email: str | None
    created_at: datetime


class CurrentSoftware(TypedDict, total=False):
    """current_software table row."""

    id: str
    session_id: str
    software_name: str
    purpose: str | None
    users_count: int | None
    monthly_cost: int | None
    satisfaction_level: int | None
    needs_replacement: bool
    created_at: datetime
