"""Keyed durable store for wizard snapshots and local records.

The store holds opaque serialized strings under string keys. Callers own
the serialization format; the store never parses values.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from src.core.config import get_settings

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class KeyValueStore(Protocol):
    """Minimal get/set/remove contract shared by every backend."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    """Process-local store used by tests and the ``memory`` backend."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileKeyValueStore:
    """One file per key under a directory.

    Keys are mapped to file names by replacing anything outside
    ``[A-Za-z0-9._-]`` with ``_``.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SupabaseKeyValueStore:
    """Store backed by a two-column (``key``, ``value``) Supabase table."""

    def __init__(self, table_name: str | None = None) -> None:
        from src.core.supabase import get_supabase_client

        self.client = get_supabase_client()
        self.table_name = table_name or get_settings().kv_table_name

    def get(self, key: str) -> str | None:
        response = (
            self.client.table(self.table_name)
            .select("value")
            .eq("key", key)
            .maybe_single()
            .execute()
        )
        if response and response.data:
            return response.data["value"]
        return None

    def set(self, key: str, value: str) -> None:
        self.client.table(self.table_name).upsert(
            {"key": key, "value": value},
            on_conflict="key",
        ).execute()

    def remove(self, key: str) -> None:
        self.client.table(self.table_name).delete().eq("key", key).execute()


@lru_cache
def get_key_value_store() -> KeyValueStore:
    """Get the keyed store for the configured persistence backend.

    Returns:
        KeyValueStore: Cached store instance.

    Note:
        Call get_key_value_store.cache_clear() after changing settings.
    """
    settings = get_settings()
    if settings.persistence_backend == "supabase":
        return SupabaseKeyValueStore(settings.kv_table_name)
    if settings.persistence_backend == "local":
        return FileKeyValueStore(Path(settings.local_data_dir) / "kv")
    logger.info("Using in-memory keyed store; data is lost on restart")
    return InMemoryKeyValueStore()
