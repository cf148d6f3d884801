"""Phrase and regex families for phishing language in subject and body."""

from __future__ import annotations

import re

_URGENCY_PHRASES = (
    "urgent",
    "immediately",
    "asap",
    "last chance",
    "expiring",
    "limited time",
    "act now",
)
_AUTHORITY_PHRASES = (
    "ceo",
    "director",
    "manager",
    "official",
    "security",
    "compliance",
    "legal",
)
_PERSONAL_INFO_PHRASES = (
    "password",
    "account",
    "verify",
    "confirm",
    "social security",
    "credit card",
    "bank account",
)
_SUSPICIOUS_PATTERNS = (
    re.compile(r"(?:click|tap)\s+here", re.IGNORECASE),
    re.compile(r"(?:verify|confirm)\s+your\s+account", re.IGNORECASE),
    re.compile(r"(?:suspicious|unusual)\s+activity", re.IGNORECASE),
    re.compile(r"(?:limited|exclusive)\s+offer", re.IGNORECASE),
    re.compile(r"\b(?:free|gift|prize)\b", re.IGNORECASE),
)
_UNNATURAL_PATTERNS = (
    re.compile(r"dear\s+valued\s+customer", re.IGNORECASE),
    re.compile(r"kindly\s+verify", re.IGNORECASE),
    re.compile(r"urgent\s+response\s+required", re.IGNORECASE),
)


def _phrase_hit(text: str, phrases: tuple[str, ...]) -> bool:
    return any(re.search(rf"\b{re.escape(phrase)}", text) for phrase in phrases)


def _pattern_hit(text: str, patterns: tuple[re.Pattern[str], ...]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def analyze_content(body: str = "", subject: str = "") -> dict[str, bool]:
    text = f"{subject or ''}\n{body or ''}".lower()
    return {
        "urgency": _phrase_hit(text, _URGENCY_PHRASES),
        "authority": _phrase_hit(text, _AUTHORITY_PHRASES),
        "personal": _phrase_hit(text, _PERSONAL_INFO_PHRASES),
        "suspicious": _pattern_hit(text, _SUSPICIOUS_PATTERNS),
        "unnatural": _pattern_hit(text, _UNNATURAL_PATTERNS),
    }
