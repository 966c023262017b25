"""Assistant chat Pydantic schemas for API request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.message import MessageRole


class ChatMessageCreate(BaseModel):
    """Schema for a message the client sends to the assistant."""

    message: str = Field(..., min_length=1, max_length=10000, description="Message text")

    @field_validator("message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message must not be empty")
        return value.strip()


class ChatMessageResponse(BaseModel):
    """Schema for one stored chat message."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(description="Message identifier")
    session_id: str = Field(description="Owning session")
    role: MessageRole = Field(description="Message role (user/assistant)")
    message: str = Field(description="Message text")
    created_at: datetime = Field(description="Creation timestamp")


class ChatReply(BaseModel):
    """The stored user message together with the assistant's answer."""

    user_message: ChatMessageResponse
    assistant_message: ChatMessageResponse
