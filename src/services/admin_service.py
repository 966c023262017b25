"""Admin dashboard service.

The login is a placeholder credential check against configured values;
it is not a real identity provider and has no lockout.
"""

import hmac
import logging
from typing import Any

from src.api.middleware.auth import encode_jwt
from src.api.middleware.error_handler import AuthenticationError
from src.core.config import get_settings
from src.core.store import KeyValueStore, get_key_value_store
from src.schemas.admin import AdminTokenResponse
from src.schemas.snapshot import (
    CompanyValue,
    Goal,
    OnboardingSnapshot,
    ProcessAnalysis,
    ProcessPhase,
)
from src.services.company_service import CompanyService
from src.services.record_service import (
    DOCUMENTS_TABLE,
    GOALS_TABLE,
    PROCESSES_TABLE,
    PRODUCTS_TABLE,
    SOFTWARE_TABLE,
    SUPPLIERS_TABLE,
    TEAM_TABLE,
    VALUES_TABLE,
    RecordService,
    get_record_service,
)
from src.services.session_service import SessionService
from src.services.wizard_service import WizardController, snapshot_key

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Ungültige Anmeldedaten"

DETAIL_TABLES = (
    PROCESSES_TABLE,
    GOALS_TABLE,
    VALUES_TABLE,
    PRODUCTS_TABLE,
    SUPPLIERS_TABLE,
    TEAM_TABLE,
    SOFTWARE_TABLE,
    DOCUMENTS_TABLE,
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


class AdminService:
    """Login and read-only views over all sessions."""

    def __init__(
        self,
        records: RecordService | None = None,
        store: KeyValueStore | None = None,
    ) -> None:
        self.records = records or get_record_service()
        self.store = store or get_key_value_store()
        self.sessions = SessionService(self.records)
        self.companies = CompanyService(self.records)

    def login(self, username: str, password: str) -> AdminTokenResponse:
        """Check the configured credentials and issue a token.

        Raises:
            AuthenticationError: If the credentials do not match.
        """
        settings = get_settings()
        valid = hmac.compare_digest(username, settings.admin_username) and hmac.compare_digest(
            password, settings.admin_password
        )
        if not valid:
            logger.warning("Failed admin login for %r", username)
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        logger.info("Admin %s logged in", username)
        return AdminTokenResponse(
            access_token=encode_jwt(username),
            expires_in=settings.admin_token_ttl_seconds,
        )

    async def session_detail(self, session_id: str) -> dict[str, Any] | None:
        """Session row, company profile, saved snapshot and per-table records."""
        session = await self.sessions.get_session(session_id)
        if session is None:
            return None

        stored = self._stored_snapshot(session_id)
        return {
            "session": session,
            "company": await self.companies.get_company(session_id),
            "snapshot": stored.model_dump(mode="json", by_alias=True) if stored else None,
            "records": {table: await self.records.list_by_session(table, session_id) for table in DETAIL_TABLES},
        }

    def _stored_snapshot(self, session_id: str) -> OnboardingSnapshot | None:
        if self.store.get(snapshot_key(session_id)) is None:
            return None
        return WizardController.load(session_id, self.store).snapshot()

    async def report_snapshot(self, session_id: str) -> OnboardingSnapshot | None:
        """Snapshot to export for a session.

        The saved wizard snapshot is used while it exists. After a
        submission it is gone, so the snapshot is rebuilt from the
        session's records. The record tables only hold contact details,
        the company profile, process analyses, goals and values; the
        rebuilt report therefore has no automations, roles, integrations,
        go-live plan, project type answers or step notes. The full answers
        went out with the submitted attachment.
        """
        session = await self.sessions.get_session(session_id)
        if session is None:
            return None

        stored = self._stored_snapshot(session_id)
        if stored is not None:
            return stored
        return await self.snapshot_from_records(session_id, session)

    async def snapshot_from_records(self, session_id: str, session: dict[str, Any]) -> OnboardingSnapshot:
        snapshot = OnboardingSnapshot(
            current_step=session.get("current_step") or 1,
            client_name=_text(session.get("client_name")),
            client_email=_text(session.get("client_email")),
            client_phone=_text(session.get("client_phone")),
        )

        company = await self.companies.get_company(session_id)
        if company:
            snapshot.company_name = _text(company.get("company_name"))
            snapshot.industry = _text(company.get("industry"))
            snapshot.founded_year = _text(company.get("founded_year"))
            snapshot.number_of_employees = _text(company.get("number_of_employees"))
            snapshot.company_location = _text(company.get("location"))
            snapshot.website = _text(company.get("website"))
            snapshot.description = _text(company.get("description"))

        for row in await self.records.list_by_session(PROCESSES_TABLE, session_id):
            phase_id = row.get("category") or row["id"]
            snapshot.selected_processes.append(ProcessPhase(id=phase_id, name=_text(row.get("process_name"))))
            snapshot.process_analyses.append(
                ProcessAnalysis(
                    process_id=phase_id,
                    current_state=_text(row.get("current_state")),
                    pain_points=_text(row.get("pain_points")),
                    desired_state=_text(row.get("desired_state")),
                    priority=row.get("priority") or "medium",
                )
            )

        snapshot.goals = [
            Goal(
                goal_type=row.get("goal_type") or "short_term",
                title=_text(row.get("title")),
                description=_text(row.get("description")),
                priority=row.get("priority") or "medium",
                target_date=row.get("target_date"),
            )
            for row in await self.records.list_by_session(GOALS_TABLE, session_id)
        ]
        snapshot.values = [
            CompanyValue(
                value_name=_text(row.get("value_name")),
                description=_text(row.get("description")),
                examples=_text(row.get("examples")),
                importance=row.get("importance") or 5,
            )
            for row in await self.records.list_by_session(VALUES_TABLE, session_id)
        ]
        return snapshot
