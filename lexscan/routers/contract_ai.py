import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from lexscan.exceptions import GenerationFailedError
from lexscan.schemas.contract_ai import (
    GenerationErrorResponse,
    NegotiationRequest,
    QuestionRequest,
    SummaryRequest,
    SummaryResponse,
    TextResponse,
)
from lexscan.services.contract_ai_service import ContractAIService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contract AI"])

GENERATION_FAILED = {500: {"model": GenerationErrorResponse}}


def get_contract_ai_service(request: Request) -> ContractAIService:
    return request.app.state.contract_ai_service


def _generation_failed(exc: GenerationFailedError) -> JSONResponse:
    body = GenerationErrorResponse(details=str(exc))
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body.model_dump())


@router.get("/")
async def service_health(request: Request):
    """Reports whether an API key is configured for the active LLM provider."""
    if not request.app.state.settings.active_api_key:
        return {"message": "Server is not running!"}
    return {"message": "Server is running!"}


@router.post("/generate-summary", response_model=SummaryResponse, responses=GENERATION_FAILED)
async def generate_summary(
    body: SummaryRequest,
    service: ContractAIService = Depends(get_contract_ai_service),
):
    """Structured JSON summary of raw contract text."""
    logger.info(f"Summary request received: {len(body.prompt)} chars")
    try:
        result = await service.summarize(body.prompt)
    except GenerationFailedError as e:
        logger.warning(f"Summary failed: {e}")
        return _generation_failed(e)
    return SummaryResponse(result=result)


@router.post("/qna", response_model=TextResponse, responses=GENERATION_FAILED)
async def answer_question(
    body: QuestionRequest,
    service: ContractAIService = Depends(get_contract_ai_service),
):
    """Answer a free-text question using a previously generated summary as context."""
    logger.info("Question request received")
    try:
        answer = await service.answer_question(body.contract_schema, body.prompt)
    except GenerationFailedError as e:
        logger.warning(f"Question answering failed: {e}")
        return _generation_failed(e)
    return TextResponse(result=answer)


@router.post("/negotiation", response_model=TextResponse, responses=GENERATION_FAILED)
async def draft_negotiation_email(
    body: NegotiationRequest,
    service: ContractAIService = Depends(get_contract_ai_service),
):
    """Draft a negotiation email in the requested tone."""
    logger.info(f"Negotiation request received: tone={body.tone!r}")
    try:
        email = await service.draft_negotiation_email(body.contract_schema, body.tone)
    except GenerationFailedError as e:
        logger.warning(f"Negotiation draft failed: {e}")
        return _generation_failed(e)
    return TextResponse(result=email)
