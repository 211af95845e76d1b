import threading
import time
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from lexscan.config import Settings
from lexscan.main import create_app
from lexscan.routers.contract_ai import get_contract_ai_service
from lexscan.services.contract_ai_service import ContractAIService
from lexscan.services.extraction_service import ExtractionResult
from lexscan.services.llm.base import LLMProvider, LLMResponse

PDF = "application/pdf"
DOC = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

NDA_PARAGRAPHS = [
    "MUTUAL NON-DISCLOSURE AGREEMENT",
    "Each party shall keep all Confidential Information strictly confidential.",
    "Confidential material must be returned upon request.",
    "Liability for breach is unlimited. Liability survives the agreement.",
    "Termination requires thirty days written notice.",
]


class FakeLLMProvider(LLMProvider):
    """Returns scripted replies (or raises) and records every call."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def complete(self, messages, temperature=0.0, max_tokens=2000, response_format=None):
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_format": response_format,
        })
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.reply, input_tokens=10, output_tokens=5, model="fake-model", latency_ms=1)

    @property
    def last_prompt(self) -> str:
        return self.calls[-1]["messages"][-1]["content"]


class BlockingExtractor:
    """Extractor that waits until released, so tests can observe in-flight state."""

    def __init__(self, text: str = "plain text"):
        self.text = text
        self.release = threading.Event()

    def extract(self, file_path: str, content_type: str) -> ExtractionResult:
        self.release.wait(timeout=5)
        return ExtractionResult(text=self.text, page_count=1)


def make_pdf(path: Path, lines: list[str]) -> Path:
    import pymupdf

    doc = pymupdf.open()
    page = doc.new_page()
    page.insert_text((72, 72), "\n".join(lines), fontsize=10)
    doc.save(str(path))
    doc.close()
    return path


def make_docx(path: Path, paragraphs: list[str]) -> Path:
    from docx import Document

    doc = Document()
    for paragraph in paragraphs:
        doc.add_paragraph(paragraph)
    doc.save(str(path))
    return path


def wait_for_terminal(client: TestClient, file_id: str, timeout: float = 5.0) -> dict:
    deadline = time.monotonic() + timeout
    while True:
        body = client.get(f"/api/status/{file_id}").json()
        if body["status"] in ("completed", "error"):
            return body
        if time.monotonic() > deadline:
            raise AssertionError(f"Processing of {file_id} did not finish: {body}")
        time.sleep(0.02)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        UPLOAD_DIR=str(tmp_path / "uploads"),
        GEMINI_API_KEY="test-key",
        LOG_LEVEL="DEBUG",
    )


@pytest.fixture
def fake_llm() -> FakeLLMProvider:
    return FakeLLMProvider()


@pytest.fixture
def app(settings, fake_llm):
    application = create_app(settings)
    application.dependency_overrides[get_contract_ai_service] = lambda: ContractAIService(fake_llm)
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
