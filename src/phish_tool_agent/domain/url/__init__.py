"""URL domain helpers."""

from phish_tool_agent.domain.url.extract import canonicalize_url, extract_urls, host_matches

__all__ = ["canonicalize_url", "extract_urls", "host_matches"]
