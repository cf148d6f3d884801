"""Rule-based risk/confidence scoring over accumulated capability results."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

BASE_RISK_SCORE = 10
BASE_CONFIDENCE = 0.5

ToolResults = Mapping[str, Any]


@dataclass(frozen=True)
class ScoreRule:
    name: str
    risk: int
    confidence: float
    note: str
    matches: Callable[[ToolResults], bool]


def _section(tool_results: ToolResults, name: str) -> Mapping[str, Any] | None:
    value = tool_results.get(name)
    return value if isinstance(value, Mapping) else None


def _link_results(tool_results: ToolResults) -> list[Mapping[str, Any]]:
    value = tool_results.get("linkReputation")
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item for item in value if isinstance(item, Mapping)]
    return []


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _header_spoofing(tool_results: ToolResults) -> bool:
    header = _section(tool_results, "headerAnalysis")
    if header is None:
        return False
    return bool(header.get("spoofingAttempts", header.get("spoofing", False)))


def _missing_auth(tool_results: ToolResults) -> bool:
    header = _section(tool_results, "headerAnalysis")
    if header is None:
        return False
    return not all(bool(header.get(key)) for key in ("spf", "dkim", "dmarc"))


def _reputation_is(level: str) -> Callable[[ToolResults], bool]:
    def _check(tool_results: ToolResults) -> bool:
        domain = _section(tool_results, "domainReputation")
        if domain is None:
            return False
        return str(domain.get("reputation", "")).strip().lower() == level

    return _check


def _blacklisted(tool_results: ToolResults) -> bool:
    domain = _section(tool_results, "domainReputation")
    if domain is None:
        return False
    status = domain.get("blacklistStatus", domain.get("blacklist", False))
    if isinstance(status, str):
        return status.strip().lower() in {"blacklisted", "malicious", "listed", "true"}
    return bool(status)


def _content_flag(flag: str) -> Callable[[ToolResults], bool]:
    def _check(tool_results: ToolResults) -> bool:
        content = _section(tool_results, "contentPattern")
        return bool(content and content.get(flag))

    return _check


def _any_link(predicate: Callable[[Mapping[str, Any]], bool]) -> Callable[[ToolResults], bool]:
    def _check(tool_results: ToolResults) -> bool:
        return any(predicate(item) for item in _link_results(tool_results))

    return _check


SCORE_RULES: tuple[ScoreRule, ...] = (
    ScoreRule("header_spoofing", 30, 0.2, "Header spoofing detected.", _header_spoofing),
    ScoreRule("missing_auth", 10, 0.1, "Missing SPF/DKIM/DMARC.", _missing_auth),
    ScoreRule("domain_poor", 30, 0.2, "Poor domain reputation.", _reputation_is("poor")),
    ScoreRule("domain_neutral", 10, 0.05, "Neutral domain reputation.", _reputation_is("neutral")),
    ScoreRule("domain_blacklisted", 30, 0.2, "Domain is blacklisted.", _blacklisted),
    ScoreRule("content_urgency", 10, 0.05, "Urgency detected in content.", _content_flag("urgency")),
    ScoreRule(
        "content_suspicious",
        10,
        0.05,
        "Suspicious content patterns detected.",
        _content_flag("suspicious"),
    ),
    ScoreRule("content_personal", 10, 0.05, "Personal info request detected.", _content_flag("personal")),
    ScoreRule(
        "link_known_phishing",
        30,
        0.2,
        "Known phishing link detected.",
        _any_link(lambda item: bool(item.get("isKnownPhishing"))),
    ),
    ScoreRule("link_no_ssl", 5, 0.0, "Link does not use SSL.", _any_link(lambda item: not item.get("ssl"))),
    ScoreRule(
        "link_redirects",
        5,
        0.0,
        "Multiple redirects in link.",
        _any_link(lambda item: _as_int(item.get("redirects")) > 1),
    ),
)


def clamp_risk(value: float) -> int:
    return max(0, min(100, int(round(value))))


def clamp_confidence(value: float) -> float:
    return max(0.0, min(1.0, round(float(value), 2)))


def score_tool_results(tool_results: ToolResults | None) -> dict[str, Any]:
    """Apply every matching rule additively, then clamp.

    Capabilities that never ran contribute nothing.
    """

    results = tool_results if isinstance(tool_results, Mapping) else {}
    risk_score = float(BASE_RISK_SCORE)
    confidence = BASE_CONFIDENCE
    notes: list[str] = []
    for rule in SCORE_RULES:
        if not rule.matches(results):
            continue
        risk_score += rule.risk
        confidence += rule.confidence
        notes.append(rule.note)
    return {
        "riskScore": clamp_risk(risk_score),
        "confidence": clamp_confidence(confidence),
        "notes": notes,
    }
