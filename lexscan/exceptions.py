class LexScanError(Exception):
    """Base exception for all LexScan errors."""
    pass


class DocumentNotFoundError(LexScanError):
    def __init__(self, file_id: str):
        self.file_id = file_id
        super().__init__(f"Document {file_id} not found")


class StatusTransitionError(LexScanError):
    """Raised when a finished status record is asked to change again."""

    def __init__(self, file_id: str, status: str):
        self.file_id = file_id
        self.status = status
        super().__init__(f"Document {file_id} is already {status}")


class ValidationFailedError(LexScanError):
    """An upload rejected before anything was written to disk."""

    status_code = 400


class MissingFileError(ValidationFailedError):
    def __init__(self):
        super().__init__("No file uploaded")


class UnsupportedFileTypeError(ValidationFailedError):
    status_code = 415

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unsupported file type: {content_type}. Only PDF, DOC, DOCX allowed")


class FileTooLargeError(ValidationFailedError):
    status_code = 413

    def __init__(self, limit_bytes: int):
        self.limit_bytes = limit_bytes
        super().__init__(f"File too large. Maximum size is {limit_bytes // (1024 * 1024)}MB")


class UnsupportedFormatError(LexScanError):
    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unsupported file type: {content_type}")


class ExtractionFailedError(LexScanError):
    """Raised when the underlying parser cannot read a document."""
    pass


class GenerationFailedError(LexScanError):
    """Raised when an LLM call or parsing its response fails."""
    pass
