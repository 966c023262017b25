"""Onboarding assistant chat routes."""

from fastapi import APIRouter, status

from src.api.deps import CurrentSession
from src.schemas.chat import ChatMessageCreate, ChatMessageResponse, ChatReply
from src.services.chat_service import ChatService

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post(
    "/messages",
    response_model=ChatReply,
    status_code=status.HTTP_201_CREATED,
    summary="Ask the onboarding assistant",
    description="Stores the message and the assistant's reply. A failed model call yields a fallback reply.",
)
async def send_message(data: ChatMessageCreate, session: CurrentSession) -> ChatReply:
    user_message, assistant_message = await ChatService().send_message(session["id"], data.message)
    return ChatReply(
        user_message=ChatMessageResponse(**user_message),
        assistant_message=ChatMessageResponse(**assistant_message),
    )


@router.get(
    "/messages",
    response_model=list[ChatMessageResponse],
    summary="Chat history",
)
async def get_history(session: CurrentSession) -> list[ChatMessageResponse]:
    messages = await ChatService().history(session["id"])
    return [ChatMessageResponse(**m) for m in messages]
