"""Integration tests for export and submission endpoints."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from src.services import submission_service
from src.services.submission_service import SUBMISSION_FAILED_MESSAGE, Attachment, TransportError

WIZARD = "/api/v1/wizard"


class FakeRelay:
    """Stands in for the form relay and keeps what it was sent."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[dict[str, str], Attachment]] = []

    async def send(self, fields: dict[str, str], attachment: Attachment) -> None:
        if self.fail:
            raise TransportError("Form relay answered 500")
        self.sent.append((fields, attachment))


@pytest.fixture
def relay(monkeypatch: pytest.MonkeyPatch) -> Callable[..., FakeRelay]:
    def install(fail: bool = False) -> FakeRelay:
        fake = FakeRelay(fail=fail)
        monkeypatch.setattr(submission_service, "FormRelayTransport", lambda: fake)
        return fake

    return install


def _complete_questionnaire(client: TestClient, headers: dict[str, str]) -> None:
    """Acme GmbH with one analyzed phase and no goals or values."""
    client.patch(WIZARD, json={"companyName": "Acme GmbH"}, headers=headers)
    client.post(f"{WIZARD}/advance", headers=headers)
    client.post(f"{WIZARD}/advance", headers=headers)
    client.post(f"{WIZARD}/process-capture/confirm", json={"phase_ids": ["lead"]}, headers=headers)
    response = client.post(f"{WIZARD}/process-capture/next", json={"current_state": "manual"}, headers=headers)
    assert response.json()["current_step"] == 4


class TestExport:
    """Tests for the download endpoints."""

    def test_markdown_download(self, client: TestClient, session_headers: dict[str, str]) -> None:
        _complete_questionnaire(client, session_headers)

        response = client.get("/api/v1/export/markdown", headers=session_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/markdown")
        assert 'filename="Onboarding_Acme_GmbH_' in response.headers["content-disposition"]
        assert response.text.startswith("# Onboarding Report: Acme GmbH")

    def test_pdf_download(self, client: TestClient, session_headers: dict[str, str]) -> None:
        response = client.get("/api/v1/export/pdf", headers=session_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")
        assert response.headers["content-disposition"].endswith(".pdf")

    def test_default_company_name_in_download_name(self, client: TestClient, session_headers: dict[str, str]) -> None:
        response = client.get("/api/v1/export/markdown", headers=session_headers)

        assert response.status_code == 200
        assert response.text.startswith("# Onboarding Report: Waldhauser Sanitär & Heizung")
        disposition = response.headers["content-disposition"]
        assert 'filename="Onboarding_Waldhauser_Sanitar_&_Heizung_' in disposition
        assert "filename*=UTF-8''Onboarding_Waldhauser_Sanit%C3%A4r_%26_Heizung_" in disposition


class TestSubmission:
    """Tests for POST /api/v1/submission."""

    def test_successful_submission(
        self,
        client: TestClient,
        session_headers: dict[str, str],
        relay: Callable[..., FakeRelay],
    ) -> None:
        fake = relay()
        _complete_questionnaire(client, session_headers)

        response = client.post("/api/v1/submission", headers=session_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["filename"].startswith("Onboarding_Acme_GmbH_")

        fields, attachment = fake.sent[0]
        assert fields["_subject"] == "Neues Onboarding: Acme GmbH"
        markdown = attachment.content.decode("utf-8")
        headers = [line for line in markdown.splitlines() if line.startswith("## ")]
        assert headers == ["## Kontaktdaten", "## Firmeninformationen", "## CRM-Phasen & Projekttypen"]
        assert "- **Aktueller Zustand:** manual" in markdown

        # the saved answers are gone and the session is closed
        snapshot = client.get(WIZARD, headers=session_headers).json()["snapshot"]
        assert snapshot["clientName"] == ""
        assert snapshot["processCapture"] == {"kind": "selecting"}
        assert client.get("/api/v1/sessions/me", headers=session_headers).json()["completed_at"] is not None

    def test_failed_delivery_keeps_answers(
        self,
        client: TestClient,
        session_headers: dict[str, str],
        relay: Callable[..., FakeRelay],
    ) -> None:
        relay(fail=True)
        _complete_questionnaire(client, session_headers)

        response = client.post("/api/v1/submission", headers=session_headers)

        assert response.status_code == 502
        data = response.json()
        assert data["error"] == "upstream_error"
        assert data["message"] == SUBMISSION_FAILED_MESSAGE

        snapshot = client.get(WIZARD, headers=session_headers).json()["snapshot"]
        assert snapshot["companyName"] == "Acme GmbH"
        assert snapshot["processCapture"] == {"kind": "done"}
        assert client.get("/api/v1/sessions/me", headers=session_headers).json()["completed_at"] is None

    def test_retry_after_failure(
        self,
        client: TestClient,
        session_headers: dict[str, str],
        relay: Callable[..., FakeRelay],
    ) -> None:
        relay(fail=True)
        _complete_questionnaire(client, session_headers)
        assert client.post("/api/v1/submission", headers=session_headers).status_code == 502

        fake = relay()
        response = client.post("/api/v1/submission", headers=session_headers)

        assert response.status_code == 200
        assert len(fake.sent) == 1

    def test_incomplete_questionnaire_is_rejected(
        self,
        client: TestClient,
        session_headers: dict[str, str],
        relay: Callable[..., FakeRelay],
    ) -> None:
        fake = relay()

        response = client.post("/api/v1/submission", headers=session_headers)

        assert response.status_code == 422
        data = response.json()
        assert data["error"] == "validation_error"
        assert {"loc": ["processCapture"], "msg": "Bitte schließen Sie die Prozessanalyse ab", "type": "value_error"} in data["details"]
        assert fake.sent == []
