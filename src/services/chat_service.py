"""Onboarding assistant chat service."""

import logging
from typing import Any, Protocol

from src.core.config import get_settings
from src.models.message import ChatMessage, MessageRole
from src.services.record_service import CHAT_TABLE, RecordService, get_record_service

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """Du bist ein hilfreicher Assistent für das Onboarding von Waldhauser Sanitär & Heizung für die Odoo-Implementierung durch PISTA Consulting.

Deine Aufgabe ist es:
- Fragen zum Onboarding-Prozess zu beantworten
- Unklarheiten bei der Dateneingabe zu klären
- Tipps zu geben, welche Informationen wichtig sind
- Zu erklären, warum bestimmte Daten für die Odoo-Implementierung benötigt werden
- Beispiele zu geben, wenn der Kunde nicht weiß, was einzutragen ist

Antworte immer auf Deutsch, freundlich und professionell. Halte dich kurz und präzise."""

FALLBACK_REPLY = "Entschuldigung, ich konnte keine Antwort generieren."

# (keywords, reply) checked in order; first match wins
CANNED_REPLIES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("prozessmappe", "prozess"),
        "Eine Prozessmappe dokumentiert alle wichtigen Geschäftsprozesse Ihres Unternehmens. "
        "Sie hilft uns, Ihre Arbeitsabläufe zu verstehen und optimal in Odoo abzubilden.",
    ),
    (
        ("dokument", "upload"),
        "Sie sollten relevante Dokumente hochladen wie: Organigramme, Prozessbeschreibungen, "
        "Preislisten, Produktkataloge oder bestehende Templates. Diese helfen uns, Ihre "
        "Anforderungen besser zu verstehen.",
    ),
    (
        ("warum", "information"),
        "Diese Informationen helfen uns, eine maßgeschneiderte Odoo-Lösung für Ihr Unternehmen "
        "zu entwickeln. Je mehr wir über Ihre Prozesse wissen, desto besser können wir das "
        "System an Ihre Bedürfnisse anpassen.",
    ),
    (
        ("odoo",),
        "Odoo ist eine umfassende Business-Software-Suite mit Modulen für CRM, "
        "Projekt-Management, Zeiterfassung, Buchhaltung und vieles mehr. Wir helfen Ihnen, "
        "die passenden Module auszuwählen und zu implementieren.",
    ),
    (
        ("dauer", "zeit"),
        "Die Implementierungsdauer hängt vom Umfang ab. Typischerweise dauert ein Odoo-Projekt "
        "zwischen 2-6 Monaten. Nach diesem Onboarding können wir Ihnen einen genaueren "
        "Zeitplan erstellen.",
    ),
)

DEFAULT_CANNED_REPLY = (
    "Danke für Ihre Frage! Für detaillierte Antworten kontaktieren Sie bitte direkt "
    "PISTA Consulting. Ich bin hier, um Sie durch den Onboarding-Prozess zu führen."
)


def canned_reply(message: str) -> str:
    """Keyword-based reply used when the model is mocked."""
    lower = message.lower()
    for keywords, reply in CANNED_REPLIES:
        if any(keyword in lower for keyword in keywords):
            return reply
    return DEFAULT_CANNED_REPLY


class ChatClient(Protocol):
    async def complete(self, messages: list[dict[str, str]], **kwargs: Any) -> str | None: ...


class EmptyMessageError(ValueError):
    """A blank message was sent."""


class ChatService:
    """Stores the conversation and asks the model for replies."""

    def __init__(
        self,
        records: RecordService | None = None,
        client: ChatClient | None = None,
    ) -> None:
        """Initialize chat service.

        Args:
            records: Optional record service for testing.
            client: Optional chat completion client. Without one the
                configured OpenAI client is used, unless mocking is on.
        """
        settings = get_settings()
        self.records = records or get_record_service()
        self.history_limit = settings.chat_history_limit
        self.use_mock = client is None and bool(settings.mock_openai)
        self._client = client

    @property
    def client(self) -> ChatClient:
        if self._client is None:
            from src.core.openai import get_openai_client

            self._client = get_openai_client()
        return self._client

    async def history(self, session_id: str) -> list[ChatMessage]:
        """All messages of the session, oldest first."""
        messages = await self.records.list_by_session(CHAT_TABLE, session_id)
        return sorted(messages, key=lambda m: m.get("created_at") or "")

    async def _store(self, session_id: str, role: MessageRole, text: str) -> ChatMessage:
        message_id = await self.records.create(
            CHAT_TABLE,
            {"session_id": session_id, "role": role.value, "message": text},
        )
        return await self.records.get(CHAT_TABLE, message_id)

    def build_prompt(self, history: list[ChatMessage]) -> list[dict[str, str]]:
        """System prompt plus the most recent turns."""
        recent = history[-self.history_limit:] if self.history_limit > 0 else []
        return [{"role": "system", "content": SYSTEM_PROMPT}] + [
            {"role": str(m["role"]), "content": m["message"]} for m in recent
        ]

    async def _reply(self, text: str, history: list[ChatMessage]) -> str:
        if self.use_mock:
            return canned_reply(text)
        try:
            content = await self.client.complete(self.build_prompt(history))
        except Exception as e:
            logger.warning("Assistant reply failed: %s", e)
            return FALLBACK_REPLY
        return content if isinstance(content, str) and content.strip() else FALLBACK_REPLY

    async def send_message(self, session_id: str, text: str) -> tuple[ChatMessage, ChatMessage]:
        """Store the user's message, get a reply and store that too.

        Returns:
            tuple[ChatMessage, ChatMessage]: The user and assistant messages.

        Raises:
            EmptyMessageError: If the text is blank.
        """
        if not text.strip():
            raise EmptyMessageError("Message must not be empty")

        user_message = await self._store(session_id, MessageRole.USER, text.strip())
        history = await self.history(session_id)
        reply = await self._reply(text, history)
        assistant_message = await self._store(session_id, MessageRole.ASSISTANT, reply)
        return user_message, assistant_message
