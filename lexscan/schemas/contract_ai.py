from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SummaryRequest(BaseModel):
    prompt: str = Field(..., description="Raw contract text")


class QuestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt: str = Field(..., description="Question about the contract")
    # Structured summary previously returned by /generate-summary, passed through untouched
    contract_schema: Any = Field(default=None, alias="schema")


class NegotiationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contract_schema: Any = Field(default=None, alias="schema")
    tone: str = "professional"


class SummaryResponse(BaseModel):
    result: Any


class TextResponse(BaseModel):
    result: str


class GenerationErrorResponse(BaseModel):
    error: str = "Failed"
    details: str
