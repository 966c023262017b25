"""Onboarding session business logic service."""

import logging
from datetime import datetime, timezone

from src.models.session import OnboardingSession, OnboardingSessionCreate, OnboardingSessionUpdate
from src.schemas.session import SessionCreate, SessionUpdate
from src.services.record_service import SESSIONS_TABLE, RecordService, get_record_service

logger = logging.getLogger(__name__)


class SessionService:
    """Service for onboarding sessions.

    Sessions are created at wizard step 1 and never deleted.
    """

    def __init__(self, records: RecordService | None = None) -> None:
        """Initialize session service.

        Args:
            records: Optional record service for testing.
        """
        self.records = records or get_record_service()

    async def create_session(self, data: SessionCreate) -> OnboardingSession:
        """Create a new session starting at step 1.

        Args:
            data: Contact details from the first wizard step.

        Returns:
            OnboardingSession: The created session row.
        """
        row: OnboardingSessionCreate = {
            "client_name": data.client_name.strip(),
            "client_email": data.client_email,
            "client_phone": data.client_phone,
            "current_step": 1,
        }
        session_id = await self.records.create(SESSIONS_TABLE, {**row, "completed_at": None})
        logger.info("Created onboarding session %s", session_id)
        return await self.records.get(SESSIONS_TABLE, session_id)

    async def get_session(self, session_id: str) -> OnboardingSession | None:
        """Get a session by its id.

        Args:
            session_id: The session id.

        Returns:
            OnboardingSession | None: The session row or None if not found.
        """
        return await self.records.get(SESSIONS_TABLE, session_id)

    async def list_sessions(self) -> list[OnboardingSession]:
        """All sessions, newest first (admin dashboard)."""
        sessions = await self.records.list_all(SESSIONS_TABLE)
        return sorted(sessions, key=lambda s: s.get("created_at") or "", reverse=True)

    async def update_session(self, session_id: str, data: SessionUpdate) -> OnboardingSession | None:
        """Update step pointer or completion time.

        Args:
            session_id: The session id.
            data: The fields to update.

        Returns:
            OnboardingSession | None: The updated row or None if not found.
        """
        changes: OnboardingSessionUpdate = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return await self.get_session(session_id)
        return await self.records.update(SESSIONS_TABLE, session_id, changes)

    async def mark_completed(self, session_id: str) -> OnboardingSession | None:
        """Record a successful submission."""
        return await self.update_session(
            session_id,
            SessionUpdate(current_step=11, completed_at=datetime.now(timezone.utc)),
        )
