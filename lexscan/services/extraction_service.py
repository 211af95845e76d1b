import logging
from dataclasses import dataclass, field

from lexscan.exceptions import ExtractionFailedError, UnsupportedFormatError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DOC_CONTENT_TYPE = "application/msword"
DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUPPORTED_CONTENT_TYPES = (PDF_CONTENT_TYPE, DOC_CONTENT_TYPE, DOCX_CONTENT_TYPE)


@dataclass
class ExtractionResult:
    text: str
    page_count: int
    metadata: dict = field(default_factory=dict)

    @property
    def word_count(self) -> int:
        return count_words(self.text)


def count_words(text: str) -> int:
    return len(text.split())


class ExtractionService:
    def extract(self, file_path: str, content_type: str) -> ExtractionResult:
        """Extract plain text from a PDF or Word file.

        Raises UnsupportedFormatError for anything else and wraps every
        parser failure (corrupt, encrypted or missing file) in
        ExtractionFailedError.
        """
        if content_type == PDF_CONTENT_TYPE:
            extractor = self._extract_pdf
        elif content_type in (DOCX_CONTENT_TYPE, DOC_CONTENT_TYPE):
            # Legacy .doc uploads are usually OOXML with the old MIME type;
            # true binary .doc files fail inside python-docx.
            extractor = self._extract_docx
        else:
            raise UnsupportedFormatError(content_type)

        try:
            return extractor(file_path)
        except ExtractionFailedError:
            raise
        except Exception as exc:
            logger.warning(f"Extraction failed for {file_path}: {exc}")
            raise ExtractionFailedError(str(exc) or exc.__class__.__name__) from exc

    def _extract_pdf(self, file_path: str) -> ExtractionResult:
        import pymupdf

        with pymupdf.open(file_path) as doc:
            if doc.needs_pass:
                raise ExtractionFailedError("PDF is password protected")
            pages = [page.get_text() for page in doc]
            metadata = {key: value for key, value in (doc.metadata or {}).items() if value}

        logger.info(f"Extracted {len(pages)} pages from PDF: {file_path}")
        return ExtractionResult(
            text="\n\n".join(pages),
            page_count=len(pages),
            metadata=metadata,
        )

    def _extract_docx(self, file_path: str) -> ExtractionResult:
        from docx import Document

        doc = Document(file_path)
        paragraphs = [p.text for p in doc.paragraphs if p.text.strip()]
        metadata: dict = {"paragraph_count": len(paragraphs)}
        props = doc.core_properties
        if props.title:
            metadata["title"] = props.title
        if props.author:
            metadata["author"] = props.author

        logger.info(f"Extracted {len(paragraphs)} paragraphs from Word document: {file_path}")
        return ExtractionResult(
            text="\n\n".join(paragraphs),
            page_count=1,
            metadata=metadata,
        )
