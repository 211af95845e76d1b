import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.responses import JSONResponse

from lexscan.exceptions import DocumentNotFoundError, ValidationFailedError
from lexscan.schemas.document import (
    DocumentResult,
    DocumentSummary,
    ErrorResponse,
    MessageResponse,
    PendingDocumentResponse,
    ProcessingStatusView,
    UploadResponse,
)
from lexscan.services.document_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documents"])

NOT_FOUND = {404: {"model": ErrorResponse}}


def get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "File not found"})


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 415: {"model": ErrorResponse}},
)
async def upload_document(
    document: UploadFile | None = File(None),
    service: DocumentService = Depends(get_document_service),
):
    """Upload a PDF, DOC or DOCX file. Processing continues after the response."""
    if document is not None:
        logger.info(f"Upload request received: filename={document.filename!r} content_type={document.content_type!r}")
    try:
        result = await service.upload(document)
    except ValidationFailedError as e:
        logger.warning(f"Upload rejected: {e}")
        return JSONResponse(status_code=e.status_code, content={"error": str(e)})

    logger.info(f"Upload accepted: file_id={result.file_id} filename={result.file.original_name!r}")
    return result


@router.get("/status/{file_id}", response_model=ProcessingStatusView, responses=NOT_FOUND)
async def get_status(file_id: str, service: DocumentService = Depends(get_document_service)):
    """Current processing status of an uploaded file."""
    try:
        return service.get_status(file_id)
    except DocumentNotFoundError:
        logger.warning(f"Status - not found: file_id={file_id}")
        return _not_found()


@router.get(
    "/document/{file_id}",
    response_model=DocumentResult,
    responses={**NOT_FOUND, 202: {"model": PendingDocumentResponse}},
)
async def get_document(file_id: str, service: DocumentService = Depends(get_document_service)):
    """Full analysis of a processed file, or 202 with progress while it is still running."""
    try:
        record = service.get_document(file_id)
    except DocumentNotFoundError:
        logger.warning(f"Get document - not found: file_id={file_id}")
        return _not_found()

    if record.status != "completed":
        pending = PendingDocumentResponse(status=record.status, stage=record.stage, progress=record.progress)
        return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=pending.model_dump(mode="json"))

    return DocumentResult.from_status(record)


@router.get("/documents", response_model=list[DocumentSummary])
async def list_documents(service: DocumentService = Depends(get_document_service)):
    """All documents that finished processing."""
    return service.list_documents()


@router.delete("/document/{file_id}", response_model=MessageResponse, responses=NOT_FOUND)
async def delete_document(file_id: str, service: DocumentService = Depends(get_document_service)):
    """Delete the stored file and its status record."""
    try:
        service.delete_document(file_id)
    except DocumentNotFoundError:
        logger.warning(f"Delete document - not found: file_id={file_id}")
        return _not_found()

    logger.info(f"Delete document success: file_id={file_id}")
    return MessageResponse(message="Document deleted successfully")
