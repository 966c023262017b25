"""Unit tests for document uploads."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from src.core.blob_storage import InMemoryBlobStorage
from src.services.document_service import DocumentService, DocumentUploadError, storage_key


@pytest.fixture
def storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture
def service(records: Any, storage: InMemoryBlobStorage) -> DocumentService:
    return DocumentService(records=records, storage=storage)


def test_storage_key_layout() -> None:
    assert storage_key("s1", "logo.png", stamp_ms=1700000000000) == "onboarding/s1/1700000000000-logo.png"
    assert storage_key("s1", "../etc/passwd", stamp_ms=1) == "onboarding/s1/1-.._etc_passwd"


class TestUpload:
    """Tests for DocumentService.upload."""

    @pytest.mark.asyncio
    async def test_upload_stores_bytes_and_record(self, service: DocumentService, storage: InMemoryBlobStorage) -> None:
        document = await service.upload("s1", "logo.png", b"\x89PNG", "image/png", "logo", "Unser Logo")

        assert document["session_id"] == "s1"
        assert document["file_size"] == 4
        assert document["document_type"] == "logo"
        assert document["file_url"].startswith("memory://onboarding/s1/")
        assert storage.blobs[document["storage_key"]] == (b"\x89PNG", "image/png")

    @pytest.mark.asyncio
    async def test_oversized_file_is_rejected_before_storing(
        self,
        service: DocumentService,
        storage: InMemoryBlobStorage,
    ) -> None:
        service.max_size = 8

        with pytest.raises(DocumentUploadError) as exc_info:
            await service.upload("s1", "big.pdf", b"x" * 9, "application/pdf", "logo")

        assert exc_info.value.status_code == 413
        assert storage.blobs == {}
        assert await service.list_documents("s1") == []

    @pytest.mark.asyncio
    async def test_unknown_document_type(self, service: DocumentService) -> None:
        with pytest.raises(DocumentUploadError) as exc_info:
            await service.upload("s1", "a.txt", b"a", "text/plain", "recipe")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Unbekannter Dokumenttyp: recipe"

    @pytest.mark.asyncio
    async def test_storage_failure(self, records: Any) -> None:
        storage = MagicMock()
        storage.put.side_effect = RuntimeError("bucket missing")
        service = DocumentService(records=records, storage=storage)

        with pytest.raises(DocumentUploadError) as exc_info:
            await service.upload("s1", "a.txt", b"a", "text/plain", "logo")

        assert exc_info.value.status_code == 502
        assert await service.list_documents("s1") == []


class TestDelete:
    """Tests for DocumentService.delete_document."""

    @pytest.mark.asyncio
    async def test_delete_removes_bytes_and_record(self, service: DocumentService, storage: InMemoryBlobStorage) -> None:
        document = await service.upload("s1", "a.txt", b"a", "text/plain", "logo")

        assert await service.delete_document("s1", document["id"]) is True
        assert storage.blobs == {}
        assert await service.list_documents("s1") == []

    @pytest.mark.asyncio
    async def test_other_session_cannot_delete(self, service: DocumentService) -> None:
        document = await service.upload("s1", "a.txt", b"a", "text/plain", "logo")

        assert await service.delete_document("s2", document["id"]) is False
        assert len(await service.list_documents("s1")) == 1

    @pytest.mark.asyncio
    async def test_record_deleted_when_blob_removal_fails(
        self,
        service: DocumentService,
        storage: InMemoryBlobStorage,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        document = await service.upload("s1", "a.txt", b"a", "text/plain", "logo")
        storage.remove = MagicMock(side_effect=RuntimeError("offline"))

        assert await service.delete_document("s1", document["id"]) is True
        assert await service.list_documents("s1") == []
        assert "Could not remove stored bytes" in caplog.text

    @pytest.mark.asyncio
    async def test_missing_document(self, service: DocumentService) -> None:
        assert await service.delete_document("s1", "nope") is False
