"""Capability registry: the closed set of analysis functions the agent may call."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, WithJsonSchema

from phish_tool_agent.core.errors import CapabilityError
from phish_tool_agent.scoring.heuristics import score_tool_results
from phish_tool_agent.tools.intel.domain_intel import analyze_domain
from phish_tool_agent.tools.intel.header_intel import analyze_headers
from phish_tool_agent.tools.intel.link_intel import LinkChecker, analyze_link, analyze_links
from phish_tool_agent.tools.text.content_patterns import analyze_content

logger = logging.getLogger(__name__)


class CapabilityKind(str, Enum):
    HEADER_ANALYSIS = "headerAnalysis"
    DOMAIN_REPUTATION = "domainReputation"
    CONTENT_PATTERN = "contentPattern"
    LINK_REPUTATION = "linkReputation"
    SCORE_EMAIL = "scoreEmail"
    FINAL_ANSWER = "finalAnswer"

    @classmethod
    def lookup(cls, name: str | None) -> "CapabilityKind | None":
        try:
            return cls(str(name or "").strip())
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        return self is CapabilityKind.FINAL_ANSWER


class CapabilityArgs(BaseModel):
    model_config = ConfigDict(extra="ignore")


class HeaderAnalysisArgs(CapabilityArgs):
    headers: dict[str, Any] = Field(default_factory=dict, description="Email headers as key-value pairs")


class DomainReputationArgs(CapabilityArgs):
    domain: str = Field(default="", description="Domain (or sender address) to check")


class ContentPatternArgs(CapabilityArgs):
    body: str = Field(default="", description="Email body")
    subject: str = Field(default="", description="Email subject")


class LinkReputationArgs(CapabilityArgs):
    url: str | None = Field(default=None, description="Single URL to check")
    urls: list[str] = Field(default_factory=list, description="URLs to check")

    def targets(self) -> list[str]:
        values = [self.url] if self.url else []
        return values + list(self.urls)


class ScoreEmailArgs(CapabilityArgs):
    toolResults: dict[str, Any] = Field(
        default_factory=dict,
        description="Results from all tools used so far",
    )


class FinalAnswerArgs(CapabilityArgs):
    model_config = ConfigDict(extra="allow")

    riskScore: Annotated[
        Any,
        WithJsonSchema({"type": "number", "description": "Phishing risk score (0-100)"}),
    ] = None
    confidence: Annotated[Any, WithJsonSchema({"type": "number", "description": "Confidence (0-1)"})] = None
    isPhishing: Annotated[Any, WithJsonSchema({"type": "boolean", "description": "Is this phishing?"})] = None
    redFlags: Annotated[
        Any,
        WithJsonSchema({"type": "array", "items": {"type": "string"}, "description": "Red flags found"}),
    ] = None
    recommendations: Annotated[
        Any,
        WithJsonSchema({"type": "array", "items": {"type": "string"}, "description": "Actionable recommendations"}),
    ] = None
    toolResults: Annotated[
        Any,
        WithJsonSchema({"type": "object", "description": "Results from all tools used"}),
    ] = None


@dataclass(frozen=True)
class CapabilitySpec:
    kind: CapabilityKind
    args_model: type[CapabilityArgs]
    description: str
    required: tuple[str, ...] = ()


CAPABILITY_SPECS: dict[CapabilityKind, CapabilitySpec] = {
    spec.kind: spec
    for spec in (
        CapabilitySpec(
            CapabilityKind.HEADER_ANALYSIS,
            HeaderAnalysisArgs,
            "Analyze email headers for spoofing, SPF/DKIM/DMARC, and suspicious patterns.",
            ("headers",),
        ),
        CapabilitySpec(
            CapabilityKind.DOMAIN_REPUTATION,
            DomainReputationArgs,
            "Check domain reputation, age, blacklist status, and similarity to known brands.",
            ("domain",),
        ),
        CapabilitySpec(
            CapabilityKind.CONTENT_PATTERN,
            ContentPatternArgs,
            "Detect urgency, authority, personal info requests, and suspicious phrases in the email.",
            ("body",),
        ),
        CapabilitySpec(
            CapabilityKind.LINK_REPUTATION,
            LinkReputationArgs,
            "Check links for known phishing, SSL status, redirects, and domain age.",
        ),
        CapabilitySpec(
            CapabilityKind.SCORE_EMAIL,
            ScoreEmailArgs,
            "Score the email for phishing risk and confidence based on tool results.",
        ),
        CapabilitySpec(
            CapabilityKind.FINAL_ANSWER,
            FinalAnswerArgs,
            "Provide the final phishing risk verdict and reasoning as structured JSON.",
            ("riskScore", "confidence", "isPhishing", "redFlags", "recommendations"),
        ),
    )
}


def _signature(spec: CapabilitySpec) -> dict[str, Any]:
    schema = spec.args_model.model_json_schema()
    properties = {
        name: {key: value for key, value in prop.items() if key not in {"title", "default"}}
        for name, prop in schema.get("properties", {}).items()
    }
    parameters: dict[str, Any] = {"type": "object", "properties": properties}
    if spec.required:
        parameters["required"] = list(spec.required)
    return {
        "type": "function",
        "function": {
            "name": spec.kind.value,
            "description": spec.description,
            "parameters": parameters,
        },
    }


@dataclass
class CapabilityRegistry:
    """Read-only dispatch table shared across analyses.

    Every capability is side-effect free; ``link_checker`` is swappable so a
    live reputation backend can replace the rule stub.
    """

    link_checker: LinkChecker = analyze_link
    link_workers: int = 8

    def resolve(self, name: str | None) -> CapabilityKind | None:
        return CapabilityKind.lookup(name)

    def signatures(self) -> list[dict[str, Any]]:
        return [_signature(spec) for spec in CAPABILITY_SPECS.values()]

    def parse_arguments(self, kind: CapabilityKind, raw: Mapping[str, Any] | None) -> CapabilityArgs:
        """Validate arguments; anything invalid degrades to an empty-argument call."""

        model = CAPABILITY_SPECS[kind].args_model
        try:
            return model.model_validate(dict(raw or {}))
        except ValidationError as exc:
            logger.warning(
                "Invalid arguments for %s (%d error(s)); using empty arguments.",
                kind.value,
                exc.error_count(),
            )
            return model()

    def dispatch(self, kind: CapabilityKind, args: CapabilityArgs) -> Any:
        match kind:
            case CapabilityKind.HEADER_ANALYSIS:
                return analyze_headers(_expect(args, HeaderAnalysisArgs).headers)
            case CapabilityKind.DOMAIN_REPUTATION:
                return analyze_domain(_expect(args, DomainReputationArgs).domain)
            case CapabilityKind.CONTENT_PATTERN:
                content_args = _expect(args, ContentPatternArgs)
                return analyze_content(content_args.body, content_args.subject)
            case CapabilityKind.LINK_REPUTATION:
                return analyze_links(
                    _expect(args, LinkReputationArgs).targets(),
                    checker=self.link_checker,
                    max_workers=self.link_workers,
                )
            case CapabilityKind.SCORE_EMAIL:
                return score_tool_results(_expect(args, ScoreEmailArgs).toolResults)
            case CapabilityKind.FINAL_ANSWER:
                final_args = _expect(args, FinalAnswerArgs)
                return {**final_args.model_dump(exclude_unset=True), **(final_args.model_extra or {})}
        raise CapabilityError(f"Unhandled capability: {kind!r}")


def _expect(args: CapabilityArgs, model: type[CapabilityArgs]) -> Any:
    if not isinstance(args, model):
        raise CapabilityError(f"Expected {model.__name__}, got {type(args).__name__}.")
    return args
