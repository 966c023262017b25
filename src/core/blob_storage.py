"""Blob storage for uploaded onboarding documents."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Protocol

from src.core.config import get_settings

logger = logging.getLogger(__name__)


class BlobStorage(Protocol):
    """Stores raw bytes under a key and hands back a URL."""

    def put(self, key: str, data: bytes, mime_type: str) -> str: ...

    def remove(self, key: str) -> None: ...


class InMemoryBlobStorage:
    """Keeps blobs in a dict; URLs use the ``memory://`` scheme."""

    def __init__(self) -> None:
        self.blobs: dict[str, tuple[bytes, str]] = {}

    def put(self, key: str, data: bytes, mime_type: str) -> str:
        self.blobs[key] = (data, mime_type)
        return f"memory://{key}"

    def remove(self, key: str) -> None:
        self.blobs.pop(key, None)


class LocalBlobStorage:
    """Writes blobs below a directory, keeping the key as relative path."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory).resolve()
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        path = (self.directory / key).resolve()
        if self.directory not in path.parents:
            raise ValueError(f"Blob key escapes storage directory: {key}")
        return path

    def put(self, key: str, data: bytes, mime_type: str) -> str:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path.as_uri()

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SupabaseBlobStorage:
    """Supabase Storage bucket; returns the object's public URL."""

    def __init__(self, bucket: str | None = None) -> None:
        from src.core.supabase import get_supabase_client

        self.client = get_supabase_client()
        self.bucket = bucket or get_settings().documents_bucket

    def put(self, key: str, data: bytes, mime_type: str) -> str:
        self.client.storage.from_(self.bucket).upload(
            path=key,
            file=data,
            file_options={"content-type": mime_type},
        )
        return self.client.storage.from_(self.bucket).get_public_url(key)

    def remove(self, key: str) -> None:
        self.client.storage.from_(self.bucket).remove([key])


@lru_cache
def get_blob_storage() -> BlobStorage:
    """Get the blob storage for the configured persistence backend."""
    settings = get_settings()
    if settings.persistence_backend == "supabase":
        return SupabaseBlobStorage(settings.documents_bucket)
    if settings.persistence_backend == "local":
        return LocalBlobStorage(Path(settings.local_data_dir) / "blobs")
    return InMemoryBlobStorage()
