"""Create schemas for the free-standing per-session record kinds."""

from datetime import date

from pydantic import BaseModel, Field

from src.models.records import GoalType, Priority


class BusinessProcessCreate(BaseModel):
    process_name: str = Field(..., min_length=1, max_length=255)
    category: str | None = None
    description: str | None = None
    current_state: str | None = None
    pain_points: str | None = None
    desired_state: str | None = None
    priority: Priority = "medium"


class GoalCreate(BaseModel):
    goal_type: GoalType = "short_term"
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    target_date: date | None = None
    priority: Priority = "medium"


class CompanyValueCreate(BaseModel):
    value_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    examples: str | None = None
    importance: int = Field(default=5, ge=1, le=10)


class ProductCreate(BaseModel):
    product_name: str = Field(..., min_length=1, max_length=255)
    category: str | None = None
    description: str | None = None
    unit_price: int | None = Field(default=None, ge=0, description="Price in cents")
    unit: str | None = None
    is_service: bool = False


class SupplierCreate(BaseModel):
    supplier_name: str = Field(..., min_length=1, max_length=255)
    contact_person: str | None = None
    email: str | None = None
    phone: str | None = None
    products: str | None = None
    payment_terms: str | None = None


class TeamMemberCreate(BaseModel):
    member_name: str = Field(..., min_length=1, max_length=255)
    role: str | None = None
    responsibilities: str | None = None
    email: str | None = None


class CurrentSoftwareCreate(BaseModel):
    software_name: str = Field(..., min_length=1, max_length=255)
    purpose: str | None = None
    users_count: int | None = Field(default=None, ge=0)
    monthly_cost: int | None = Field(default=None, ge=0, description="Cost in cents")
    satisfaction_level: int | None = Field(default=None, ge=1, le=5)
    needs_replacement: bool = False
