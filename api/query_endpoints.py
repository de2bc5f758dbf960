"""
FastAPI Endpoints for Research Queries
Forwards free-text questions to the research agent and serializes its response
"""

import logging
import time
import uuid
from typing import Any, List, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.error_handling import classify_error
from monitoring.metrics import inc as metrics_inc, observe as metrics_observe
from rag.agent import LegalResearchAgent
from rag.response_generator import FALLBACK_ANSWER

logger = logging.getLogger(__name__)
request_log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/query", tags=["Research Queries"])

DEGRADED_ANSWER = (
    "An unexpected issue prevented me from processing that request. Please retry in a moment."
)
DEGRADED_DISCLAIMER = (
    "Research assistant only. Confirm the status of every authority and consult "
    "licensed counsel before acting."
)


class QueryRequest(BaseModel):
    """Research question request model"""
    question: Optional[str] = Field(None, description="Free-text legal research question")

    @field_validator('question', mode='before')
    @classmethod
    def coerce_question(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class SupportingEntry(BaseModel):
    """One matched corpus entry with the keywords that fired"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    summary: str
    citations: List[str]
    era: str
    jurisdiction: str
    category: str
    matched_keywords: List[str] = Field(..., alias="matchedKeywords")


class QueryResponse(BaseModel):
    """Research answer response model"""
    model_config = ConfigDict(populate_by_name=True)

    answer: str
    supporting_entries: List[SupportingEntry] = Field(..., alias="supportingEntries")
    disclaimer: str


def degraded_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "answer": DEGRADED_ANSWER,
            "supportingEntries": [],
            "disclaimer": DEGRADED_DISCLAIMER,
        }
    )


def get_agent(request: Request) -> LegalResearchAgent:
    """Return the agent built at application startup"""
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Research agent is not initialized"
        )
    return agent


@router.post(
    "",
    response_model=QueryResponse,
    response_model_by_alias=True,
    summary="Ask Research Question",
    description="Match a legal research question against the knowledge corpus and return a synthesized answer"
)
async def ask_question(
    payload: Optional[QueryRequest] = None,
    agent: LegalResearchAgent = Depends(get_agent)
) -> Any:
    """
    Answer a research question.

    A missing or empty question is valid and returns the fallback answer.
    Unexpected failures return the degraded response with status 500.
    """
    request_id = str(uuid.uuid4())
    start_time = time.perf_counter()
    question = payload.question if payload is not None else ""

    try:
        await metrics_inc("query_requests_total")

        response = agent.answer(question)
        body = QueryResponse.model_validate(response.to_dict())

        processing_time = time.perf_counter() - start_time
        await metrics_observe("query_processing_seconds", processing_time)
        await metrics_observe("query_supporting_entries", float(len(response.supporting_entries)))
        if response.answer == FALLBACK_ANSWER:
            await metrics_inc("query_fallback_total")

        request_log.info(
            "query_answered",
            request_id=request_id,
            supporting_entries=[r.entry.id for r in response.supporting_entries],
            duration=round(processing_time, 6),
        )
        return body

    except Exception as e:
        error_type, severity = classify_error(e)
        logger.error(
            f"Agent error while answering query: {e}",
            extra={'request_id': request_id, 'error_type': error_type.value, 'severity': severity.value},
            exc_info=True
        )
        await metrics_inc("query_request_errors_total", labels={"error_type": error_type.value})
        return degraded_response()


@router.get("/health", summary="Query service health")
async def query_health(agent: LegalResearchAgent = Depends(get_agent)):
    return {
        "status": "healthy",
        "corpus_size": len(agent.corpus),
    }
