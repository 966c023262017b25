"""Per-entity record persistence keyed by session id.

Every questionnaire entity (session, company profile, processes, goals,
documents, chat messages, ...) is written independently through this
interface. There are no multi-entity transactions: a failed write to one
table never rolls back another.
"""

import json
import logging
import threading
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Any, Protocol
from uuid import uuid4

from src.core.config import get_settings
from src.core.store import KeyValueStore, get_key_value_store

logger = logging.getLogger(__name__)

SESSIONS_TABLE = "onboarding_sessions"
COMPANY_TABLE = "company_info"
PROCESSES_TABLE = "business_processes"
GOALS_TABLE = "goals_and_wishes"
VALUES_TABLE = "company_values"
PRODUCTS_TABLE = "products"
SUPPLIERS_TABLE = "suppliers"
TEAM_TABLE = "team_members"
SOFTWARE_TABLE = "current_software"
DOCUMENTS_TABLE = "documents"
CHAT_TABLE = "chat_messages"


class RecordServiceError(Exception):
    """A record could not be read or written."""


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _jsonable(record: dict[str, Any]) -> dict[str, Any]:
    """Convert dates to ISO strings so the row serializes as JSON."""
    return {
        key: value.isoformat() if isinstance(value, (datetime, date)) else value
        for key, value in record.items()
    }


def new_record_id() -> str:
    """Generate an opaque record id."""
    return uuid4().hex


class RecordService(Protocol):
    """CRUD over session-scoped tables."""

    async def create(self, table: str, record: dict[str, Any]) -> str: ...

    async def list_by_session(self, table: str, session_id: str) -> list[dict[str, Any]]: ...

    async def get(self, table: str, record_id: str) -> dict[str, Any] | None: ...

    async def update(self, table: str, record_id: str, changes: dict[str, Any]) -> dict[str, Any] | None: ...

    async def delete(self, table: str, record_id: str) -> bool: ...

    async def list_all(self, table: str) -> list[dict[str, Any]]: ...

    async def upsert_by_session(self, table: str, session_id: str, record: dict[str, Any]) -> dict[str, Any]: ...


class SupabaseRecordService:
    """Record service backed by Supabase tables with snake_case columns."""

    def __init__(self) -> None:
        from src.core.supabase import get_supabase_client

        self.client = get_supabase_client()

    async def create(self, table: str, record: dict[str, Any]) -> str:
        row = _jsonable({"id": new_record_id(), **record})
        response = self.client.table(table).insert(row).execute()
        if not response.data:
            raise RecordServiceError(f"Insert into {table} returned no rows")
        return response.data[0]["id"]

    async def list_by_session(self, table: str, session_id: str) -> list[dict[str, Any]]:
        response = (
            self.client.table(table)
            .select("*")
            .eq("session_id", session_id)
            .order("created_at")
            .execute()
        )
        return response.data or []

    async def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        response = (
            self.client.table(table)
            .select("*")
            .eq("id", record_id)
            .maybe_single()
            .execute()
        )
        return response.data if response and response.data else None

    async def update(self, table: str, record_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        if not changes:
            return await self.get(table, record_id)
        response = (
            self.client.table(table)
            .update(_jsonable({**changes, "updated_at": _utcnow_iso()}))
            .eq("id", record_id)
            .execute()
        )
        return response.data[0] if response.data else None

    async def delete(self, table: str, record_id: str) -> bool:
        response = self.client.table(table).delete().eq("id", record_id).execute()
        return bool(response.data)

    async def list_all(self, table: str) -> list[dict[str, Any]]:
        response = self.client.table(table).select("*").order("created_at", desc=True).execute()
        return response.data or []

    async def upsert_by_session(self, table: str, session_id: str, record: dict[str, Any]) -> dict[str, Any]:
        existing = await self.list_by_session(table, session_id)
        if existing:
            updated = await self.update(table, existing[0]["id"], record)
            if updated is None:
                raise RecordServiceError(f"Update of {table} for session {session_id} failed")
            return updated

        record_id = await self.create(table, {**record, "session_id": session_id})
        created = await self.get(table, record_id)
        if created is None:
            raise RecordServiceError(f"Insert into {table} for session {session_id} not readable")
        return created


class KeyValueRecordService:
    """Record service that keeps each table as a JSON list in the keyed store.

    Used when no backing database is configured. Rows keep insertion order,
    which is also creation-time order.
    """

    KEY_PREFIX = "records"

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._lock = threading.Lock()

    def _key(self, table: str) -> str:
        return f"{self.KEY_PREFIX}:{table}"

    def _load(self, table: str) -> list[dict[str, Any]]:
        raw = self.store.get(self._key(table))
        if raw is None:
            return []
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable rows for table %s", table)
            return []
        return rows if isinstance(rows, list) else []

    def _save(self, table: str, rows: list[dict[str, Any]]) -> None:
        self.store.set(self._key(table), json.dumps(rows, ensure_ascii=False))

    async def create(self, table: str, record: dict[str, Any]) -> str:
        now = _utcnow_iso()
        row = _jsonable({"id": new_record_id(), "created_at": now, "updated_at": now, **record})
        with self._lock:
            rows = self._load(table)
            rows.append(row)
            self._save(table, rows)
        return row["id"]

    async def list_by_session(self, table: str, session_id: str) -> list[dict[str, Any]]:
        return [row for row in self._load(table) if row.get("session_id") == session_id]

    async def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        return next((row for row in self._load(table) if row.get("id") == record_id), None)

    async def update(self, table: str, record_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        with self._lock:
            rows = self._load(table)
            for row in rows:
                if row.get("id") == record_id:
                    row.update(_jsonable(changes))
                    row["updated_at"] = _utcnow_iso()
                    self._save(table, rows)
                    return row
        return None

    async def delete(self, table: str, record_id: str) -> bool:
        with self._lock:
            rows = self._load(table)
            remaining = [row for row in rows if row.get("id") != record_id]
            if len(remaining) == len(rows):
                return False
            self._save(table, remaining)
        return True

    async def list_all(self, table: str) -> list[dict[str, Any]]:
        return list(reversed(self._load(table)))

    async def upsert_by_session(self, table: str, session_id: str, record: dict[str, Any]) -> dict[str, Any]:
        existing = await self.list_by_session(table, session_id)
        if existing:
            updated = await self.update(table, existing[0]["id"], record)
            if updated is not None:
                return updated
        record_id = await self.create(table, {**record, "session_id": session_id})
        created = await self.get(table, record_id)
        if created is None:
            raise RecordServiceError(f"Insert into {table} for session {session_id} not readable")
        return created


@lru_cache
def get_record_service() -> RecordService:
    """Get the record service for the configured persistence backend.

    Note:
        Call get_record_service.cache_clear() after changing settings.
    """
    if get_settings().uses_supabase:
        return SupabaseRecordService()
    return KeyValueRecordService(get_key_value_store())
