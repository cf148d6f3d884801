"""Structured contracts for agent I/O."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NO_ANALYSIS_ERROR = "No analysis could be performed."


class CapabilityInvocation(BaseModel):
    """Capability call requested by the reasoning service (arguments still raw JSON)."""

    name: str
    arguments: str = "{}"
    call_id: str = ""


class Analysis(BaseModel):
    """Final verdict returned to callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_phishing: bool
    confidence: float = Field(ge=0.0, le=1.0)
    risk_score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    tool_results: dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class AnalysisError(BaseModel):
    """Explicit soft failure returned instead of an Analysis."""

    error: str = NO_ANALYSIS_ERROR

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
