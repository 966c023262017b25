"""Uploaded document Pydantic schemas for API responses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DocumentResponse(BaseModel):
    """Schema for uploaded document metadata."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Document identifier")
    session_id: str = Field(description="Owning session")
    document_type: str = Field(description="Document type tag")
    file_name: str = Field(description="Original file name")
    file_url: str = Field(description="Where the bytes can be fetched")
    file_size: int = Field(description="Size in bytes")
    mime_type: str = Field(description="MIME type")
    description: str | None = Field(default=None, description="Optional description")
    created_at: datetime | None = None
