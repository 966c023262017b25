"""Chat message model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict


class MessageRole(str, Enum):
    """Chat message role values matching database enum."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(TypedDict):
    """chat_messages table row representation.

    Append-only, ordered by created_at within a session.
    """

    id: str
    session_id: str
    role: MessageRole
    message: str
    created_at: datetime
