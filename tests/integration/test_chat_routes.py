"""Integration tests for the assistant chat endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from src.core.config import get_settings
from src.services.chat_service import FALLBACK_REPLY

MESSAGES = "/api/v1/chat/messages"


class TestChatRoutes:
    """Tests for /api/v1/chat/messages."""

    def test_canned_reply_in_mock_mode(self, client: TestClient, session_headers: dict[str, str]) -> None:
        response = client.post(MESSAGES, json={"message": "Was ist Odoo?"}, headers=session_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["user_message"]["role"] == "user"
        assert data["assistant_message"]["role"] == "assistant"
        assert data["assistant_message"]["message"].startswith("Odoo ist")

    def test_history(self, client: TestClient, session_headers: dict[str, str]) -> None:
        client.post(MESSAGES, json={"message": "Hallo"}, headers=session_headers)

        history = client.get(MESSAGES, headers=session_headers).json()

        assert [m["role"] for m in history] == ["user", "assistant"]
        assert history[0]["message"] == "Hallo"

    def test_blank_message_is_rejected(self, client: TestClient, session_headers: dict[str, str]) -> None:
        response = client.post(MESSAGES, json={"message": "   "}, headers=session_headers)

        assert response.status_code == 422
        assert client.get(MESSAGES, headers=session_headers).json() == []

    def test_model_failure_returns_fallback(
        self,
        client: TestClient,
        session_headers: dict[str, str],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        failing = AsyncMock()
        failing.complete.side_effect = RuntimeError("timeout")
        monkeypatch.setattr(get_settings(), "mock_openai", False)

        with patch("src.core.openai.get_openai_client", return_value=failing):
            response = client.post(MESSAGES, json={"message": "Hallo"}, headers=session_headers)

        assert response.status_code == 201
        assert response.json()["assistant_message"]["message"] == FALLBACK_REPLY
        failing.complete.assert_awaited_once()
