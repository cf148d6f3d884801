"""Header-level phishing signals (Reply-To spoofing and SPF/DKIM/DMARC)."""

from __future__ import annotations

from collections.abc import Mapping
from email.utils import parseaddr
from typing import Any

REPLY_TO_MISMATCH = "Reply-To differs from From"


def default_header_result() -> dict[str, Any]:
    """Result assumed before header analysis runs: no spoofing, no auth passes."""

    return {
        "spoofingAttempts": False,
        "suspiciousHeaders": [],
        "spf": False,
        "dkim": False,
        "dmarc": False,
    }


def _header_map(headers: Mapping[str, Any] | None) -> dict[str, str]:
    header_map: dict[str, str] = {}
    for key, value in (headers or {}).items():
        if isinstance(value, (list, tuple)):
            value = " ".join(str(item) for item in value)
        header_map[str(key).strip().lower()] = str(value if value is not None else "")
    return header_map


def _address(raw: str) -> str:
    _, addr = parseaddr(raw or "")
    return (addr or raw or "").strip().lower()


def analyze_headers(headers: Mapping[str, Any] | None = None) -> dict[str, Any]:
    header_map = _header_map(headers)
    result = default_header_result()

    reply_to = header_map.get("reply-to", "").strip()
    sender = header_map.get("from", "").strip()
    if reply_to and _address(reply_to) != _address(sender):
        result["spoofingAttempts"] = True
        result["suspiciousHeaders"].append(REPLY_TO_MISMATCH)

    auth = header_map.get("authentication-results", "").lower()
    result["spf"] = "spf=pass" in auth
    result["dkim"] = "dkim=pass" in auth
    result["dmarc"] = "dmarc=pass" in auth
    return result
