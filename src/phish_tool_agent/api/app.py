"""FastAPI entrypoint."""

from __future__ import annotations

from functools import lru_cache
import logging
from typing import Any

from fastapi import Depends, FastAPI, HTTPException

from phish_tool_agent.core.errors import IngestionError, ReasoningServiceError
from phish_tool_agent.domain.email.parse import parse_email_payload
from phish_tool_agent.orchestrator.build import create_agent
from phish_tool_agent.orchestrator.pipeline import AgentService

logger = logging.getLogger(__name__)

app = FastAPI(title="phish-tool-agent")


@lru_cache(maxsize=1)
def get_agent() -> AgentService:
    agent, _ = create_agent()
    return agent


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/analyze")
def analyze(payload: dict[str, Any], agent: AgentService = Depends(get_agent)) -> dict[str, Any]:
    raw = payload.get("email")
    if not isinstance(raw, dict) or not raw:
        raise HTTPException(status_code=400, detail="Missing email content.")
    try:
        email = parse_email_payload(raw)
    except IngestionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not email.has_required_fields():
        raise HTTPException(status_code=400, detail="Missing required email fields (from, subject, date, body).")
    try:
        result = agent.analyze(email)
    except ReasoningServiceError as exc:
        logger.error("Analysis failed: %s", exc)
        raise HTTPException(status_code=502, detail="Reasoning service unavailable.") from exc
    return {"analysis": result}
