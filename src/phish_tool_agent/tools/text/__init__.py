"""Text analysis tools."""

from phish_tool_agent.tools.text.content_patterns import analyze_content

__all__ = ["analyze_content"]
