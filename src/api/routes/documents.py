"""Document upload routes."""

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from src.api.deps import CurrentSession
from src.schemas.common import SuccessResponse
from src.schemas.document import DocumentResponse
from src.services.document_service import DocumentService, DocumentUploadError

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={413: {"description": "File larger than the upload limit"}},
    summary="Upload a document",
)
async def upload_document(
    session: CurrentSession,
    file: UploadFile = File(...),
    document_type: str = Form(..., alias="documentType"),
    description: str | None = Form(default=None),
) -> DocumentResponse:
    """Upload one file for the session.

    Args:
        session: The caller's session.
        file: Multipart file.
        document_type: Type tag (logo, letterhead, invoice_template, ...).
        description: Optional description.

    Returns:
        DocumentResponse: Stored document metadata.

    Raises:
        HTTPException: 400 on an unknown type, 413 if too large,
            502 if storage failed.
    """
    content = await file.read()
    try:
        document = await DocumentService().upload(
            session["id"],
            file_name=file.filename or "upload",
            content=content,
            mime_type=file.content_type or "application/octet-stream",
            document_type=document_type,
            description=description,
        )
    except DocumentUploadError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return DocumentResponse(**document)


@router.get(
    "",
    response_model=list[DocumentResponse],
    summary="List uploaded documents",
)
async def list_documents(session: CurrentSession) -> list[DocumentResponse]:
    documents = await DocumentService().list_documents(session["id"])
    return [DocumentResponse(**d) for d in documents]


@router.delete(
    "/{document_id}",
    response_model=SuccessResponse,
    summary="Delete a document",
)
async def delete_document(document_id: str, session: CurrentSession) -> SuccessResponse:
    deleted = await DocumentService().delete_document(session["id"], document_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Document not found",
        )
    return SuccessResponse()
