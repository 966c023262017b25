"""Unit tests for the admin dashboard service."""

from typing import Any

import pytest

from src.api.middleware.auth import decode_jwt
from src.api.middleware.error_handler import AuthenticationError
from src.schemas.company import CompanyInfoUpsert
from src.schemas.session import SessionCreate
from src.services.admin_service import INVALID_CREDENTIALS_MESSAGE, AdminService
from src.services.company_service import CompanyService
from src.services.record_service import GOALS_TABLE, PROCESSES_TABLE, VALUES_TABLE
from src.services.session_service import SessionService
from src.services.wizard_service import WizardService


@pytest.fixture
def service(records: Any, memory_store: Any) -> AdminService:
    return AdminService(records=records, store=memory_store)


class TestLogin:
    def test_valid_credentials(self, service: AdminService) -> None:
        token = service.login("PISTA", "admin")

        assert token.token_type == "bearer"
        assert decode_jwt(token.access_token).sub == "PISTA"

    @pytest.mark.parametrize(
        ("username", "password"),
        [("PISTA", "wrong"), ("pista", "admin"), ("", "")],
    )
    def test_invalid_credentials(self, service: AdminService, username: str, password: str) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            service.login(username, password)

        assert exc_info.value.message == INVALID_CREDENTIALS_MESSAGE


class TestSessionDetail:
    """Tests for session_detail and report_snapshot."""

    @pytest.mark.asyncio
    async def test_unknown_session(self, service: AdminService) -> None:
        assert await service.session_detail("missing") is None
        assert await service.report_snapshot("missing") is None

    @pytest.mark.asyncio
    async def test_detail_includes_saved_snapshot(self, service: AdminService, records: Any, memory_store: Any) -> None:
        session = await SessionService(records).create_session(SessionCreate(client_name="Max Mustermann"))
        await WizardService(memory_store).start(session["id"], client_name="Max Mustermann")

        detail = await service.session_detail(session["id"])

        assert detail["session"]["id"] == session["id"]
        assert detail["company"] is None
        assert detail["snapshot"]["clientName"] == "Max Mustermann"
        assert detail["records"][GOALS_TABLE] == []

    @pytest.mark.asyncio
    async def test_report_prefers_saved_snapshot(self, service: AdminService, records: Any, memory_store: Any) -> None:
        session = await SessionService(records).create_session(SessionCreate(client_name="Max Mustermann"))
        controller = await WizardService(memory_store).start(session["id"], client_name="Max Mustermann")
        controller.update({"industry": "Sanitär"})

        snapshot = await service.report_snapshot(session["id"])

        assert snapshot.industry == "Sanitär"

    @pytest.mark.asyncio
    async def test_report_rebuilt_from_records(self, service: AdminService, records: Any) -> None:
        session = await SessionService(records).create_session(
            SessionCreate(client_name="Max Mustermann", client_email="max@example.com")
        )
        session_id = session["id"]
        await CompanyService(records).upsert_company(
            session_id,
            CompanyInfoUpsert(company_name="Acme GmbH", founded_year=1990, location="Wien"),
        )
        await records.create(
            PROCESSES_TABLE,
            {
                "session_id": session_id,
                "process_name": "Lead-Erfassung",
                "category": "lead",
                "current_state": "manual",
                "priority": "high",
            },
        )
        await records.create(GOALS_TABLE, {"session_id": session_id, "title": "Papierlos", "goal_type": "vision"})
        await records.create(VALUES_TABLE, {"session_id": session_id, "value_name": "Qualität", "importance": 8})

        snapshot = await service.report_snapshot(session_id)

        assert snapshot.client_email == "max@example.com"
        assert snapshot.company_name == "Acme GmbH"
        assert snapshot.founded_year == "1990"
        assert snapshot.company_location == "Wien"
        assert snapshot.phase_ids() == ["lead"]
        assert snapshot.process_analyses[0].current_state == "manual"
        assert snapshot.process_analyses[0].priority == "high"
        assert [(g.title, g.goal_type, g.priority) for g in snapshot.goals] == [("Papierlos", "vision", "medium")]
        assert snapshot.values[0].importance == 8
