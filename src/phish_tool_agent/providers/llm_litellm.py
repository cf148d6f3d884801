"""LiteLLM reasoning client for local/third-party providers (e.g. Ollama)."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any

from phish_tool_agent.core.errors import ReasoningServiceError
from phish_tool_agent.orchestrator.state import Transcript
from phish_tool_agent.providers.base import ReasoningReply, parse_chat_reply, transcript_to_messages
from phish_tool_agent.providers.llm_openai import ProviderConfig

logger = logging.getLogger(__name__)


class LiteLLMReasoningClient:
    def __init__(self, cfg: ProviderConfig) -> None:
        self.cfg = cfg

    def complete(self, transcript: Transcript, signatures: Sequence[dict[str, Any]]) -> ReasoningReply:
        import litellm

        try:
            response = litellm.completion(
                model=self.cfg.model,
                messages=transcript_to_messages(transcript),
                tools=list(signatures),
                tool_choice="auto",
                temperature=self.cfg.temperature,
                api_base=self.cfg.api_base,
                api_key=self.cfg.api_key,
                timeout=self.cfg.timeout_s,
            )
        except Exception as exc:  # noqa: BLE001 - any provider failure is a transport failure
            logger.error("Reasoning call to %s failed: %s", self.cfg.model, exc)
            raise ReasoningServiceError(f"{type(exc).__name__}: {exc}") from exc
        return parse_chat_reply(response)
