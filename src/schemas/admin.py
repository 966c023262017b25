"""Admin dashboard Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.schemas.company import CompanyInfoResponse
from src.schemas.session import SessionResponse


class AdminLoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AdminTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Seconds until the token expires")


class TokenPayload(BaseModel):
    """Claims of an admin token."""

    model_config = ConfigDict(from_attributes=True)

    sub: str = Field(description="Admin username")
    role: str = Field(default="admin")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")


class AdminSessionDetail(BaseModel):
    """Everything captured for one session."""

    session: SessionResponse
    company: CompanyInfoResponse | None = None
    snapshot: dict[str, Any] | None = Field(default=None, description="Saved wizard snapshot, if still present")
    records: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
