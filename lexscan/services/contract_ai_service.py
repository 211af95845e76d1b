import json
import logging
import re
from typing import Any

from lexscan.exceptions import GenerationFailedError
from lexscan.services.llm.base import LLMProvider, LLMResponse
from lexscan.services.llm.prompts.contract_qna import CONTRACT_QNA_USER
from lexscan.services.llm.prompts.contract_summary import CONTRACT_SUMMARY_SYSTEM, CONTRACT_SUMMARY_USER
from lexscan.services.llm.prompts.negotiation_email import NEGOTIATION_EMAIL_USER

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```[a-zA-Z]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


def strip_code_fence(text: str) -> str:
    """Remove a markdown code fence wrapped around a model reply, if any."""
    text = text.strip()
    if not text.startswith("```"):
        return text
    text = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", text, count=1).strip()


class ContractAIService:
    """Summaries, Q&A and negotiation drafts for contract text, one LLM call each.

    Stateless apart from the provider. Every failure, whether from the
    provider or from parsing its reply, is raised as GenerationFailedError.
    """

    def __init__(
        self,
        llm: LLMProvider,
        temperature: float = 0.0,
        max_output_tokens: int = 4000,
        max_input_chars: int = 400_000,
    ):
        self.llm = llm
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.max_input_chars = max_input_chars

    async def summarize(self, contract_text: str) -> Any:
        """Return the structured summary the model produced for the contract.

        The reply must be JSON (optionally fenced). Anything else is a
        failure; the raw text is not returned.
        """
        truncated_text = contract_text[:self.max_input_chars]
        if len(contract_text) > self.max_input_chars:
            logger.warning(
                f"Contract text truncated from {len(contract_text)} "
                f"to {self.max_input_chars} chars before LLM call"
            )

        messages = [
            {"role": "system", "content": CONTRACT_SUMMARY_SYSTEM},
            {"role": "user", "content": CONTRACT_SUMMARY_USER.format(contract_text=truncated_text)},
        ]
        response = await self._complete(messages, operation="summary", response_format={"type": "json_object"})

        try:
            return json.loads(strip_code_fence(response.content))
        except json.JSONDecodeError as exc:
            logger.warning(f"Summary reply was not valid JSON: {exc}")
            raise GenerationFailedError(str(exc)) from exc

    async def answer_question(self, contract_schema: Any, question: str) -> str:
        prompt = CONTRACT_QNA_USER.format(
            contract_schema=json.dumps(contract_schema),
            question=question,
        )
        response = await self._complete([{"role": "user", "content": prompt}], operation="qna")
        return response.content.strip()

    async def draft_negotiation_email(self, contract_schema: Any, tone: str) -> str:
        prompt = NEGOTIATION_EMAIL_USER.format(
            contract_schema=json.dumps(contract_schema),
            tone=tone,
        )
        response = await self._complete([{"role": "user", "content": prompt}], operation="negotiation")
        return response.content.strip()

    async def _complete(
        self, messages: list[dict], operation: str, response_format: dict | None = None
    ) -> LLMResponse:
        logger.info(f"Calling LLM for {operation}")
        try:
            response = await self.llm.complete(
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_output_tokens,
                response_format=response_format,
            )
        except Exception as exc:
            logger.error(f"LLM call for {operation} failed: {exc}")
            raise GenerationFailedError(str(exc) or exc.__class__.__name__) from exc

        logger.info(
            f"LLM {operation} done: model={response.model} "
            f"({response.input_tokens} in / {response.output_tokens} out tokens, {response.latency_ms}ms)"
        )
        return response
