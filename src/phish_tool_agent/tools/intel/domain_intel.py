"""Domain reputation stub: deterministic rules instead of live lookups."""

from __future__ import annotations

from email.utils import parseaddr
from typing import Any

CONSUMER_MAIL_DOMAINS = ("gmail.com", "outlook.com", "hotmail.com", "yahoo.com", "icloud.com")
DISPOSABLE_MARKERS = ("temp-mail", "throwaway")


def normalize_domain(raw: str) -> str:
    """Accept a bare domain, an address, or a display-name address."""

    value = (raw or "").strip()
    _, addr = parseaddr(value)
    if "@" in addr:
        value = addr
    if "@" in value:
        value = value.rsplit("@", 1)[-1]
    return value.strip().strip(">").strip(".").lower()


def analyze_domain(domain: str) -> dict[str, Any]:
    clean = normalize_domain(domain)
    if any(clean == item or clean.endswith(f".{item}") for item in CONSUMER_MAIL_DOMAINS):
        return {
            "domain": clean,
            "reputation": "good",
            "age": 20,
            "blacklistStatus": False,
            "isKnownBrand": True,
        }
    if any(marker in clean for marker in DISPOSABLE_MARKERS):
        return {
            "domain": clean,
            "reputation": "poor",
            "age": 0,
            "blacklistStatus": True,
            "isKnownBrand": False,
        }
    return {
        "domain": clean,
        "reputation": "neutral",
        "age": 2,
        "blacklistStatus": False,
        "isKnownBrand": False,
    }
