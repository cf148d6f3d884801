"""Link reputation stub and the per-link fan-out used by the orchestrator."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Any
from urllib.parse import urlparse

from phish_tool_agent.domain.url.extract import canonicalize_url, host_matches

logger = logging.getLogger(__name__)

SHORTENER_DOMAINS = ("bit.ly", "tinyurl.com", "t.co", "rb.gy", "goo.gl", "ow.ly", "is.gd")

LinkChecker = Callable[[str], dict[str, Any]]


def _link_host(raw: str) -> str:
    """Host of an absolute or scheme-less link (`www.example.com/x`); empty if none parses."""

    try:
        parsed = urlparse(raw)
        host = parsed.hostname or (urlparse(f"//{raw}").hostname if not parsed.scheme else None)
    except ValueError:
        return ""
    return (host or "").lower()


def _is_shortener(raw: str) -> bool:
    host = _link_host(raw)
    if host:
        return host_matches(host, SHORTENER_DOMAINS)
    lowered = raw.lower()
    return any(domain in lowered for domain in SHORTENER_DOMAINS)


def analyze_link(url: str) -> dict[str, Any]:
    """Rule stub; every string is a valid input, unrecognized shapes get the plain-http result."""

    raw = (url or "").strip()
    if _is_shortener(raw):
        return {"url": raw, "isKnownPhishing": True, "ssl": False, "redirects": 2, "domainAge": 0}
    if raw.lower().startswith("https://"):
        return {"url": raw, "isKnownPhishing": False, "ssl": True, "redirects": 0, "domainAge": 5}
    return {"url": raw, "isKnownPhishing": False, "ssl": False, "redirects": 0, "domainAge": 1}


def conservative_link_result(url: str, error: str) -> dict[str, Any]:
    """Stand-in for a link whose analysis failed: treated as suspicious."""

    return {
        "url": url,
        "isKnownPhishing": True,
        "ssl": False,
        "redirects": 0,
        "domainAge": 0,
        "error": error,
    }


def distinct_links(urls: Iterable[str]) -> list[str]:
    seen: dict[str, str] = {}
    for item in urls:
        raw = str(item or "").strip()
        if not raw:
            continue
        seen.setdefault(canonicalize_url(raw), raw)
    return list(seen.values())


def _check_isolated(checker: LinkChecker, url: str) -> dict[str, Any]:
    try:
        result = checker(url)
    except Exception as exc:
        logger.warning("Link analysis failed for %s: %s", url, exc)
        return conservative_link_result(url, type(exc).__name__)
    if not isinstance(result, dict):
        return conservative_link_result(url, "InvalidResult")
    return {"url": url, **result}


def analyze_links(
    urls: Iterable[str],
    *,
    checker: LinkChecker = analyze_link,
    max_workers: int = 8,
) -> list[dict[str, Any]]:
    """Analyze each distinct link concurrently; one failure never affects the others."""

    targets = distinct_links(urls)
    if not targets:
        return []
    workers = max(1, min(int(max_workers), len(targets)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="link-intel") as pool:
        return list(pool.map(lambda url: _check_isolated(checker, url), targets))
