"""Uploaded document business logic service."""

import logging
import time

from src.core.blob_storage import BlobStorage, get_blob_storage
from src.core.config import get_settings
from src.models.document import Document
from src.services.catalogs import DOCUMENT_TYPES
from src.services.record_service import DOCUMENTS_TABLE, RecordService, get_record_service

logger = logging.getLogger(__name__)


class DocumentUploadError(Exception):
    """The upload was rejected or storage failed."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def storage_key(session_id: str, file_name: str, stamp_ms: int | None = None) -> str:
    """Blob key ``onboarding/{session_id}/{timestamp}-{file name}``."""
    stamp = stamp_ms if stamp_ms is not None else int(time.time() * 1000)
    safe_name = file_name.replace("/", "_").replace("\\", "_").strip() or "upload"
    return f"onboarding/{session_id}/{stamp}-{safe_name}"


class DocumentService:
    """Service for uploaded documents (metadata record plus stored bytes)."""

    def __init__(
        self,
        records: RecordService | None = None,
        storage: BlobStorage | None = None,
    ) -> None:
        """Initialize document service.

        Args:
            records: Optional record service for testing.
            storage: Optional blob storage for testing.
        """
        self.records = records or get_record_service()
        self.storage = storage or get_blob_storage()
        self.max_size = get_settings().max_upload_size_bytes

    async def upload(
        self,
        session_id: str,
        file_name: str,
        content: bytes,
        mime_type: str,
        document_type: str,
        description: str | None = None,
    ) -> Document:
        """Store a file and record its metadata.

        The size limit is checked before anything is stored.

        Raises:
            DocumentUploadError: On an unknown type, an oversized file or a
                storage failure.
        """
        if document_type not in DOCUMENT_TYPES:
            raise DocumentUploadError(f"Unbekannter Dokumenttyp: {document_type}")
        if len(content) > self.max_size:
            limit_mb = self.max_size // (1024 * 1024)
            raise DocumentUploadError(f"Die Datei ist zu groß (maximal {limit_mb} MB)", status_code=413)

        key = storage_key(session_id, file_name)
        try:
            url = self.storage.put(key, content, mime_type or "application/octet-stream")
        except Exception as e:
            logger.error("Storing %s failed: %s", key, e)
            raise DocumentUploadError("Fehler beim Hochladen der Datei", status_code=502) from e

        document_id = await self.records.create(
            DOCUMENTS_TABLE,
            {
                "session_id": session_id,
                "document_type": document_type,
                "file_name": file_name,
                "file_url": url,
                "storage_key": key,
                "file_size": len(content),
                "mime_type": mime_type or "application/octet-stream",
                "description": description,
            },
        )
        logger.info("Stored document %s for session %s (%d bytes)", document_id, session_id, len(content))
        return await self.records.get(DOCUMENTS_TABLE, document_id)

    async def list_documents(self, session_id: str) -> list[Document]:
        return await self.records.list_by_session(DOCUMENTS_TABLE, session_id)

    async def delete_document(self, session_id: str, document_id: str) -> bool:
        """Delete a document of the session.

        A failure to remove the stored bytes is logged; the record is
        deleted regardless.

        Returns:
            bool: False if the document does not exist in this session.
        """
        document = await self.records.get(DOCUMENTS_TABLE, document_id)
        if document is None or document.get("session_id") != session_id:
            return False

        try:
            self.storage.remove(document.get("storage_key") or "")
        except Exception as e:
            logger.warning("Could not remove stored bytes of document %s: %s", document_id, e)

        return await self.records.delete(DOCUMENTS_TABLE, document_id)
