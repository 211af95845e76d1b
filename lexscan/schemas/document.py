from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ProcessingState = Literal["processing", "completed", "error"]
ProcessingStage = Literal["processing", "extracting_text", "analyzing_content", "done", "error"]

TERMINAL_STATES: frozenset[str] = frozenset({"completed", "error"})


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadedFile(CamelModel):
    """A file accepted by the upload endpoint and written to disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    original_name: str
    mimetype: str
    size: int
    storage_path: str = Field(exclude=True)
    uploaded_at: datetime


class ProcessingStatusView(CamelModel):
    """Status of one uploaded file as clients see it.

    The analysis fields stay unset until processing completes; `error` is
    only set when it fails.
    """

    id: str
    original_name: str
    mimetype: str
    size: int
    uploaded_at: datetime

    status: ProcessingState = "processing"
    stage: ProcessingStage = "processing"
    progress: int = Field(default=0, ge=0, le=100)

    extracted_text: str | None = None
    document_type: str | None = None
    risk_score: int | None = None
    word_count: int | None = None
    page_count: int | None = None
    document_metadata: dict[str, Any] | None = None
    completed_at: datetime | None = None
    error: str | None = None


class ProcessingStatus(ProcessingStatusView):
    """Stored status record; also knows where the uploaded file lives."""

    storage_path: str = Field(exclude=True)

    @classmethod
    def from_upload(cls, uploaded: UploadedFile) -> "ProcessingStatus":
        return cls(
            id=uploaded.id,
            original_name=uploaded.original_name,
            mimetype=uploaded.mimetype,
            size=uploaded.size,
            storage_path=uploaded.storage_path,
            uploaded_at=uploaded.uploaded_at,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES


class UploadedFileInfo(CamelModel):
    id: str
    original_name: str
    mimetype: str
    size: int
    status: ProcessingState
    uploaded_at: datetime


class UploadResponse(CamelModel):
    """Returned immediately after a successful upload."""

    success: bool = True
    file_id: str
    message: str = "File uploaded successfully. Processing started."
    file: UploadedFileInfo


class DocumentSummary(CamelModel):
    """A completed document as listed on the dashboard."""

    id: str
    original_name: str
    document_type: str | None
    risk_score: int | None
    word_count: int | None
    uploaded_at: datetime
    completed_at: datetime | None

    @classmethod
    def from_status(cls, record: ProcessingStatus) -> "DocumentSummary":
        return cls.model_validate(record.model_dump())


class DocumentResult(DocumentSummary):
    """Full analysis result for a completed document."""

    page_count: int | None
    document_metadata: dict[str, Any] | None = None
    extracted_text: str | None


class PendingDocumentResponse(CamelModel):
    message: str = "File is still processing"
    status: ProcessingState
    stage: ProcessingStage
    progress: int


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
