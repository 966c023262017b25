"""Unit tests for the record services."""

from unittest.mock import MagicMock, patch

import pytest

from src.core.store import InMemoryKeyValueStore
from src.services.record_service import (
    COMPANY_TABLE,
    GOALS_TABLE,
    SESSIONS_TABLE,
    KeyValueRecordService,
    RecordServiceError,
    SupabaseRecordService,
)


class TestKeyValueRecordService:
    """Tests for the keyed-store record service."""

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_timestamps(self, records: KeyValueRecordService) -> None:
        record_id = await records.create(GOALS_TABLE, {"session_id": "s1", "title": "Wachstum"})

        row = await records.get(GOALS_TABLE, record_id)
        assert row["title"] == "Wachstum"
        assert row["created_at"]
        assert len(record_id) == 32

    @pytest.mark.asyncio
    async def test_list_by_session_filters_and_keeps_order(self, records: KeyValueRecordService) -> None:
        await records.create(GOALS_TABLE, {"session_id": "s1", "title": "A"})
        await records.create(GOALS_TABLE, {"session_id": "s2", "title": "B"})
        await records.create(GOALS_TABLE, {"session_id": "s1", "title": "C"})

        rows = await records.list_by_session(GOALS_TABLE, "s1")

        assert [r["title"] for r in rows] == ["A", "C"]

    @pytest.mark.asyncio
    async def test_list_all_is_newest_first(self, records: KeyValueRecordService) -> None:
        await records.create(SESSIONS_TABLE, {"client_name": "first"})
        await records.create(SESSIONS_TABLE, {"client_name": "second"})

        rows = await records.list_all(SESSIONS_TABLE)

        assert [r["client_name"] for r in rows] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_update_and_delete(self, records: KeyValueRecordService) -> None:
        record_id = await records.create(SESSIONS_TABLE, {"client_name": "Max", "current_step": 1})

        updated = await records.update(SESSIONS_TABLE, record_id, {"current_step": 4})
        assert updated["current_step"] == 4

        assert await records.delete(SESSIONS_TABLE, record_id) is True
        assert await records.delete(SESSIONS_TABLE, record_id) is False
        assert await records.get(SESSIONS_TABLE, record_id) is None

    @pytest.mark.asyncio
    async def test_update_missing_record_returns_none(self, records: KeyValueRecordService) -> None:
        assert await records.update(SESSIONS_TABLE, "nope", {"current_step": 2}) is None

    @pytest.mark.asyncio
    async def test_upsert_by_session_keeps_one_row(self, records: KeyValueRecordService) -> None:
        first = await records.upsert_by_session(COMPANY_TABLE, "s1", {"company_name": "Acme GmbH"})
        second = await records.upsert_by_session(COMPANY_TABLE, "s1", {"company_name": "Acme AG"})

        rows = await records.list_by_session(COMPANY_TABLE, "s1")
        assert len(rows) == 1
        assert first["id"] == second["id"]
        assert rows[0]["company_name"] == "Acme AG"

    @pytest.mark.asyncio
    async def test_unreadable_table_is_treated_as_empty(self) -> None:
        store = InMemoryKeyValueStore()
        store.set("records:goals_and_wishes", "{not json")

        rows = await KeyValueRecordService(store).list_by_session(GOALS_TABLE, "s1")

        assert rows == []


class TestSupabaseRecordService:
    """Tests for the Supabase record service."""

    @pytest.fixture
    def mock_supabase(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def service(self, mock_supabase: MagicMock) -> SupabaseRecordService:
        with patch("src.core.supabase.get_supabase_client", return_value=mock_supabase):
            return SupabaseRecordService()

    @pytest.mark.asyncio
    async def test_create_inserts_row_with_generated_id(
        self, service: SupabaseRecordService, mock_supabase: MagicMock
    ) -> None:
        mock_response = MagicMock()
        mock_response.data = [{"id": "abc"}]
        mock_supabase.table.return_value.insert.return_value.execute.return_value = mock_response

        record_id = await service.create(GOALS_TABLE, {"session_id": "s1", "title": "X"})

        assert record_id == "abc"
        inserted = mock_supabase.table.return_value.insert.call_args[0][0]
        assert inserted["session_id"] == "s1"
        assert "id" in inserted

    @pytest.mark.asyncio
    async def test_create_raises_when_nothing_inserted(
        self, service: SupabaseRecordService, mock_supabase: MagicMock
    ) -> None:
        mock_response = MagicMock()
        mock_response.data = []
        mock_supabase.table.return_value.insert.return_value.execute.return_value = mock_response

        with pytest.raises(RecordServiceError):
            await service.create(GOALS_TABLE, {"session_id": "s1"})

    @pytest.mark.asyncio
    async def test_list_by_session_orders_by_creation(
        self, service: SupabaseRecordService, mock_supabase: MagicMock
    ) -> None:
        mock_response = MagicMock()
        mock_response.data = [{"id": "1"}]
        (
            mock_supabase.table.return_value.select.return_value.eq.return_value
            .order.return_value.execute.return_value
        ) = mock_response

        rows = await service.list_by_session(GOALS_TABLE, "s1")

        assert rows == [{"id": "1"}]
        mock_supabase.table.return_value.select.return_value.eq.assert_called_once_with("session_id", "s1")
        mock_supabase.table.return_value.select.return_value.eq.return_value.order.assert_called_once_with(
            "created_at"
        )
