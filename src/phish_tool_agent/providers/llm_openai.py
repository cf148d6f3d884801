"""OpenAI chat-completions reasoning client."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
from typing import Any

from phish_tool_agent.core.errors import ReasoningServiceError
from phish_tool_agent.orchestrator.state import Transcript
from phish_tool_agent.providers.base import ReasoningReply, parse_chat_reply, transcript_to_messages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderConfig:
    provider: str
    model: str
    api_base: str | None = None
    api_key: str | None = None
    temperature: float = 0.0
    timeout_s: float = 60.0


class OpenAIReasoningClient:
    def __init__(self, cfg: ProviderConfig, client: Any | None = None) -> None:
        self.cfg = cfg
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.cfg.api_key,
                base_url=self.cfg.api_base,
                timeout=self.cfg.timeout_s,
            )
        return self._client

    def complete(self, transcript: Transcript, signatures: Sequence[dict[str, Any]]) -> ReasoningReply:
        try:
            response = self._get_client().chat.completions.create(
                model=self.cfg.model,
                messages=transcript_to_messages(transcript),
                tools=list(signatures),
                tool_choice="auto",
                parallel_tool_calls=False,
                temperature=self.cfg.temperature,
            )
        except Exception as exc:  # noqa: BLE001 - any SDK failure is a transport failure
            logger.error("Reasoning call to %s failed: %s", self.cfg.model, exc)
            raise ReasoningServiceError(f"{type(exc).__name__}: {exc}") from exc
        return parse_chat_reply(response)
