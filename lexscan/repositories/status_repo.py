import logging
import threading
from pathlib import Path

from lexscan.exceptions import DocumentNotFoundError, StatusTransitionError
from lexscan.schemas.document import ProcessingStatus

logger = logging.getLogger(__name__)


class ProcessingStatusRepository:
    """In-memory store of processing status records, keyed by file ID.

    Records are replaced wholesale on every update, so readers never see a
    half-applied change. Nothing survives a restart and the store is only
    valid within a single process.
    """

    def __init__(self) -> None:
        self._records: dict[str, ProcessingStatus] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, file_id: object) -> bool:
        return file_id in self._records

    def create(self, record: ProcessingStatus) -> ProcessingStatus:
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Status record {record.id} already exists")
            self._records[record.id] = record
        return record

    def get(self, file_id: str) -> ProcessingStatus:
        record = self._records.get(file_id)
        if record is None:
            raise DocumentNotFoundError(file_id)
        return record

    def update(self, file_id: str, **fields) -> ProcessingStatus:
        """Merge fields into the record and store the result.

        Progress is clamped so it never moves backwards, and a record that
        already reached a terminal status cannot change again.
        """
        with self._lock:
            current = self._records.get(file_id)
            if current is None:
                raise DocumentNotFoundError(file_id)
            if current.is_terminal:
                raise StatusTransitionError(file_id, current.status)

            if "progress" in fields:
                fields["progress"] = max(current.progress, fields["progress"])

            # storage_path is excluded from dumps, so carry it over explicitly
            merged = {**current.model_dump(), "storage_path": current.storage_path, **fields}
            updated = ProcessingStatus.model_validate(merged)
            self._records[file_id] = updated
        return updated

    def delete(self, file_id: str) -> ProcessingStatus:
        """Remove the record and its stored file. A file already gone from disk is fine."""
        with self._lock:
            record = self._records.pop(file_id, None)
        if record is None:
            raise DocumentNotFoundError(file_id)

        Path(record.storage_path).unlink(missing_ok=True)
        logger.info(f"Deleted status record and stored file for {file_id}")
        return record

    def list_completed(self) -> list[ProcessingStatus]:
        return [record for record in list(self._records.values()) if record.status == "completed"]
