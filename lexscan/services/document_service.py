import asyncio
import contextlib
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

import aiofiles
from fastapi import UploadFile

from lexscan.events.bus import EventBus
from lexscan.events.document_events import DocumentUploaded
from lexscan.exceptions import (
    DocumentNotFoundError,
    FileTooLargeError,
    LexScanError,
    MissingFileError,
    UnsupportedFileTypeError,
)
from lexscan.repositories.status_repo import ProcessingStatusRepository
from lexscan.schemas.document import (
    DocumentSummary,
    ProcessingStatus,
    UploadedFile,
    UploadedFileInfo,
    UploadResponse,
)
from lexscan.services.analysis_service import calculate_risk_score, classify_document
from lexscan.services.extraction_service import SUPPORTED_CONTENT_TYPES, ExtractionService

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class DocumentService:
    """Accepts uploads and runs their text extraction and analysis in the background.

    `upload` returns as soon as the file is on disk and registered. The
    event bus then schedules `process_document` as an asyncio task, tracked
    by file ID until it finishes.
    """

    def __init__(
        self,
        repo: ProcessingStatusRepository,
        event_bus: EventBus,
        upload_dir: Path,
        extractor: ExtractionService | None = None,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        max_concurrent: int = 0,
    ):
        self.repo = repo
        self.event_bus = event_bus
        self.upload_dir = Path(upload_dir)
        self.extractor = extractor or ExtractionService()
        self.max_upload_bytes = max_upload_bytes
        self._semaphore = asyncio.Semaphore(max_concurrent) if max_concurrent > 0 else None
        self._tasks: dict[str, asyncio.Task] = {}

    async def upload(self, file: UploadFile | None) -> UploadResponse:
        # 1. Validate before touching the disk
        if file is None or not file.filename:
            raise MissingFileError()
        if file.content_type not in SUPPORTED_CONTENT_TYPES:
            raise UnsupportedFileTypeError(file.content_type or "unknown")

        content = await file.read(self.max_upload_bytes + 1)
        if len(content) > self.max_upload_bytes:
            raise FileTooLargeError(self.max_upload_bytes)

        # 2. Save under a unique prefix so identical names never collide
        file_id = uuid.uuid4().hex
        original_name = Path(file.filename).name or "unnamed"
        file_path = self.upload_dir / f"{file_id}-{original_name}"
        self.upload_dir.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(file_path, "wb") as f:
            await f.write(content)

        # 3. Register, then hand off to background processing
        uploaded = UploadedFile(
            id=file_id,
            original_name=original_name,
            mimetype=file.content_type,
            size=len(content),
            storage_path=str(file_path),
            uploaded_at=datetime.now(timezone.utc),
        )
        record = self.repo.create(ProcessingStatus.from_upload(uploaded))
        self.event_bus.publish(DocumentUploaded(file_id, original_name, uploaded.mimetype))

        return UploadResponse(
            file_id=file_id,
            file=UploadedFileInfo.model_validate(record.model_dump()),
        )

    def schedule_processing(self, file_id: str) -> asyncio.Task:
        task = asyncio.create_task(self.process_document(file_id), name=f"process-{file_id}")
        self._tasks[file_id] = task
        task.add_done_callback(lambda _: self._tasks.pop(file_id, None))
        return task

    @property
    def pending_tasks(self) -> dict[str, asyncio.Task]:
        return dict(self._tasks)

    async def process_document(self, file_id: str) -> None:
        """Extract, classify and score one document, recording progress as it goes.

        Never raises: failures end up on the status record instead.
        """
        limiter = self._semaphore or contextlib.nullcontext()
        async with limiter:
            try:
                record = self.repo.update(file_id, stage="extracting_text", progress=20)
                extraction = await asyncio.to_thread(self.extractor.extract, record.storage_path, record.mimetype)

                self.repo.update(file_id, stage="analyzing_content", progress=70)
                document_type = classify_document(extraction.text)
                risk_score = calculate_risk_score(extraction.text)

                # All analysis fields land in one update
                self.repo.update(
                    file_id,
                    status="completed",
                    stage="done",
                    progress=100,
                    extracted_text=extraction.text,
                    document_type=document_type,
                    risk_score=risk_score,
                    word_count=extraction.word_count,
                    page_count=extraction.page_count,
                    document_metadata=extraction.metadata,
                    completed_at=datetime.now(timezone.utc),
                )
                logger.info(
                    f"Processed {file_id}: type={document_type!r} risk={risk_score} words={extraction.word_count}"
                )

            except DocumentNotFoundError:
                logger.warning(f"Document {file_id} was deleted during processing, stopping")

            except Exception as exc:
                logger.exception(f"Processing failed for {file_id}: {exc}")
                self._mark_failed(file_id, str(exc) or exc.__class__.__name__)

    def _mark_failed(self, file_id: str, error_message: str) -> None:
        try:
            self.repo.update(file_id, status="error", stage="error", error=error_message)
        except LexScanError as inner:
            logger.error(f"Could not mark {file_id} as failed: {inner}")

    def get_status(self, file_id: str) -> ProcessingStatus:
        return self.repo.get(file_id)

    def get_document(self, file_id: str) -> ProcessingStatus:
        return self.repo.get(file_id)

    def list_documents(self) -> list[DocumentSummary]:
        return [DocumentSummary.from_status(record) for record in self.repo.list_completed()]

    def delete_document(self, file_id: str) -> None:
        self.repo.delete(file_id)

    async def shutdown(self) -> None:
        """Cancel any processing still running and wait for it to unwind."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info(f"Cancelling {len(tasks)} in-flight processing task(s)")
            await asyncio.gather(*tasks, return_exceptions=True)
