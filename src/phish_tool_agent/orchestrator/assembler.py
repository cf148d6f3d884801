"""Reduce the terminal payload and accumulated results into a validated Analysis."""

from __future__ import annotations

from collections.abc import Mapping
import json
import math
import re
from typing import Any

from phish_tool_agent.agents.contracts import Analysis
from phish_tool_agent.orchestrator.state import ToolResultStore
from phish_tool_agent.scoring.heuristics import clamp_confidence, clamp_risk, score_tool_results
from phish_tool_agent.tools.registry import CapabilityKind

_JSON_FENCE_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL | re.IGNORECASE)
_JSON_RE = re.compile(r"\{.*\}", re.DOTALL)

PHISHING_THRESHOLD = 50


def extract_json(text: str) -> dict[str, Any] | None:
    """Find a JSON object in free text, fenced first, then the outermost braces."""

    candidates: list[str] = []
    fenced = _JSON_FENCE_RE.search(text or "")
    if fenced:
        candidates.append(fenced.group(1))
    bare = _JSON_RE.search(text or "")
    if bare:
        candidates.append(bare.group(0))
    for candidate in candidates:
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None


def coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def coerce_number(value: Any) -> float | None:
    """Numbers and numeric strings only; bools, non-finite and out-of-range values are rejected."""

    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def coerce_text_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None and str(item).strip()]
    return []


def dedupe_link_results(value: Any) -> Any:
    """Keep the last result per URL, in first-seen order."""

    if not isinstance(value, list):
        return value
    by_url: dict[str, Any] = {}
    passthrough: list[Any] = []
    for item in value:
        if isinstance(item, Mapping) and item.get("url"):
            by_url[str(item["url"])] = item
        else:
            passthrough.append(item)
    return [*by_url.values(), *passthrough]


def tool_results_snapshot(store: ToolResultStore) -> dict[str, Any]:
    snapshot = store.snapshot(exclude=(CapabilityKind.FINAL_ANSWER.value,))
    if "linkReputation" in snapshot:
        snapshot["linkReputation"] = dedupe_link_results(snapshot["linkReputation"])
    return snapshot


def normalize_payload(payload: Mapping[str, Any] | str | None) -> dict[str, Any]:
    if isinstance(payload, Mapping):
        return dict(payload)
    if isinstance(payload, str):
        parsed = extract_json(payload)
        if parsed is not None:
            return parsed
        return {"reasons": [payload.strip()]} if payload.strip() else {}
    return {}


def _fallback_score(store: ToolResultStore) -> dict[str, Any]:
    last = store.get(CapabilityKind.SCORE_EMAIL.value)
    if isinstance(last, Mapping):
        return dict(last)
    return score_tool_results(store.snapshot(exclude=(CapabilityKind.FINAL_ANSWER.value,)))


def assemble(payload: Mapping[str, Any] | str | None, store: ToolResultStore) -> Analysis:
    """Total: every field has a documented fallback, so this never raises on model output."""

    data = normalize_payload(payload)
    fallback: dict[str, Any] | None = None

    def scored() -> dict[str, Any]:
        nonlocal fallback
        if fallback is None:
            fallback = _fallback_score(store)
        return fallback

    risk = coerce_number(data.get("riskScore"))
    if risk is None:
        risk = coerce_number(scored().get("riskScore")) or 0.0
    confidence = coerce_number(data.get("confidence"))
    if confidence is None:
        confidence = coerce_number(scored().get("confidence")) or 0.0
    risk_score = clamp_risk(risk)

    is_phishing = coerce_bool(data.get("isPhishing"))
    if is_phishing is None:
        is_phishing = risk_score >= PHISHING_THRESHOLD

    reasons = coerce_text_list(data.get("reasons")) or coerce_text_list(data.get("redFlags"))
    if not reasons:
        reasons = coerce_text_list(scored().get("notes"))

    return Analysis(
        is_phishing=is_phishing,
        confidence=clamp_confidence(confidence),
        risk_score=risk_score,
        reasons=reasons,
        recommendations=coerce_text_list(data.get("recommendations")),
        tool_results=tool_results_snapshot(store),
    )
