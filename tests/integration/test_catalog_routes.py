"""Integration tests for catalog and recommendation endpoints."""

from fastapi.testclient import TestClient


class TestCatalogs:
    def test_all_catalogs(self, client: TestClient) -> None:
        data = client.get("/api/v1/catalogs").json()

        assert [p["id"] for p in data["phases"]][:3] == ["lead", "qualification", "quote"]
        assert "sanitaer" in [t["id"] for t in data["project_types"]]
        assert "logo" in data["document_types"]


class TestRecommendations:
    """Tests for /api/v1/recommendations."""

    def test_explicit_selection(self, client: TestClient) -> None:
        response = client.post("/api/v1/recommendations", json={"phase_ids": ["aftercare"]})

        modules = {m["id"]: m for m in response.json()["modules"]}
        assert modules["helpdesk"]["recommended"] is True

    def test_session_selection(self, client: TestClient, session_headers: dict[str, str]) -> None:
        client.post("/api/v1/wizard/goto", json={"step": 3}, headers=session_headers)
        client.post(
            "/api/v1/wizard/process-capture/confirm",
            json={"phase_ids": ["aftercare"]},
            headers=session_headers,
        )

        data = client.get("/api/v1/recommendations", headers=session_headers).json()

        modules = {m["id"]: m for m in data["modules"]}
        assert modules["email_marketing"]["recommended"] is True
        assert data["summary"] == {"essential": 4, "recommended": 2, "optional": 3}

    def test_no_selection_uses_catalog_defaults(self, client: TestClient, session_headers: dict[str, str]) -> None:
        data = client.get("/api/v1/recommendations", headers=session_headers).json()

        modules = {m["id"]: m for m in data["modules"]}
        assert modules["helpdesk"]["recommended"] is False
        assert modules["crm"]["recommended"] is True
