"""Uploaded document model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict


class Document(TypedDict):
    """documents table row representation.

    Metadata only; the bytes live in blob storage under ``storage_key``.
    """

    id: str
    session_id: str
    document_type: str
    file_name: str
    file_url: str
    storage_key: str
    file_size: int
    mime_type: str
    description: str | None
    created_at: datetime
