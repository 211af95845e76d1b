import logging
from typing import TYPE_CHECKING

from lexscan.events.document_events import DocumentUploaded

if TYPE_CHECKING:
    from lexscan.services.document_service import DocumentService

logger = logging.getLogger(__name__)


def on_document_uploaded(event: DocumentUploaded, service: "DocumentService") -> None:
    logger.info(f"DocumentUploaded received for {event.file_id} ({event.mimetype}), scheduling processing")
    service.schedule_processing(event.file_id)
