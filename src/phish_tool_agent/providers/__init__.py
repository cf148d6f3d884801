"""Reasoning-service provider adapters."""

from __future__ import annotations

from phish_tool_agent.providers.base import ReasoningClient, ReasoningReply
from phish_tool_agent.providers.llm_litellm import LiteLLMReasoningClient
from phish_tool_agent.providers.llm_openai import OpenAIReasoningClient, ProviderConfig


def build_reasoning_client(cfg: ProviderConfig) -> ReasoningClient:
    """`openai` uses the OpenAI SDK; `local`/`ollama` and anything else go through LiteLLM."""

    provider = (cfg.provider or "openai").strip().lower()
    if provider == "openai":
        return OpenAIReasoningClient(cfg)
    return LiteLLMReasoningClient(cfg)


__all__ = [
    "LiteLLMReasoningClient",
    "OpenAIReasoningClient",
    "ProviderConfig",
    "ReasoningClient",
    "ReasoningReply",
    "build_reasoning_client",
]
