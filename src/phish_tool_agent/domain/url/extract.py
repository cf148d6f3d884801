"""URL extraction and canonicalization."""

from __future__ import annotations

from urllib.parse import urlparse, urlunparse
import re

URL_PATTERN = re.compile(r"https?://[^\s<>()\[\]{}\"']+", re.IGNORECASE)
_TRAILING_PUNCTUATION = ".,;:!?"


def extract_urls(text: str) -> list[str]:
    """Extract HTTP(S) URLs from text, in order of first appearance."""

    urls = (item.rstrip(_TRAILING_PUNCTUATION) for item in URL_PATTERN.findall(text or ""))
    return list(dict.fromkeys(canonicalize_url(item) for item in urls if item.strip()))


def canonicalize_url(url: str) -> str:
    """Normalize URL to a stable lowercase host form."""

    raw = (url or "").strip()
    if not raw:
        return ""
    parsed = urlparse(raw)
    if not parsed.scheme or not parsed.netloc:
        return raw
    normalized = parsed._replace(scheme=parsed.scheme.lower(), netloc=parsed.netloc.lower())
    return urlunparse(normalized)


def host_matches(host: str, domains: tuple[str, ...]) -> bool:
    clean = (host or "").lower()
    return any(clean == item or clean.endswith(f".{item}") for item in domains)
