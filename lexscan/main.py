import functools
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lexscan import __version__
from lexscan.config import Settings
from lexscan.events.bus import EventBus
from lexscan.events.document_events import DocumentUploaded
from lexscan.events.handlers.document_handlers import on_document_uploaded
from lexscan.middleware import RequestIDLogFilter, RequestIDMiddleware
from lexscan.repositories.status_repo import ProcessingStatusRepository
from lexscan.services.contract_ai_service import ContractAIService
from lexscan.services.document_service import DocumentService
from lexscan.services.llm.factory import create_llm_provider

logger = logging.getLogger(__name__)


def configure_logging(log_level: str) -> None:
    """Set up logging with request ID injected into every log line."""
    log_filter = RequestIDLogFilter()
    formatter = logging.Formatter(
        "%(asctime)s [%(request_id)s] %(levelname)s %(name)s: %(message)s"
    )

    # Replace existing handlers on the root logger rather than using basicConfig
    # (basicConfig is a no-op if handlers are already set, which uvicorn does at startup)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.addFilter(log_filter)
    root_logger.addHandler(handler)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator:
    """Build the per-process stores and services; cancel in-flight processing on shutdown."""
    settings: Settings = application.state.settings

    event_bus = EventBus()
    document_service = DocumentService(
        repo=ProcessingStatusRepository(),
        event_bus=event_bus,
        upload_dir=Path(settings.UPLOAD_DIR),
        max_upload_bytes=settings.max_upload_bytes,
        max_concurrent=settings.MAX_CONCURRENT_PROCESSING,
    )
    event_bus.register(DocumentUploaded, functools.partial(on_document_uploaded, service=document_service))

    application.state.event_bus = event_bus
    application.state.document_service = document_service
    application.state.contract_ai_service = ContractAIService(
        create_llm_provider(settings),
        temperature=settings.LLM_TEMPERATURE,
        max_output_tokens=settings.LLM_MAX_OUTPUT_TOKENS,
        max_input_chars=settings.LLM_MAX_INPUT_CHARS,
    )

    if not settings.active_api_key:
        logger.warning(f"No API key configured for LLM provider {settings.LLM_PROVIDER!r}")

    yield

    await document_service.shutdown()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory."""
    settings = settings or Settings()

    application = FastAPI(
        title="LexScan",
        description="Legal document upload, analysis and contract AI assistant",
        version=__version__,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    application.state.settings = settings

    configure_logging(settings.LOG_LEVEL)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestIDMiddleware)

    from lexscan.routers.contract_ai import router as contract_ai_router, service_health
    from lexscan.routers.documents import router as documents_router

    application.include_router(contract_ai_router, prefix=settings.API_PREFIX)
    application.include_router(documents_router, prefix=settings.API_PREFIX)

    # The prefix itself answers like "/" under it, without a redirect
    if settings.API_PREFIX:
        application.add_api_route(settings.API_PREFIX, service_health, methods=["GET"], include_in_schema=False)

    @application.get("/health", tags=["Health Check"])
    async def health_check():
        return {"status": "healthy", "version": __version__}

    return application


app = create_app()
