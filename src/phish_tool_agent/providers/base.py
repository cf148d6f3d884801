"""Reasoning-service contract shared by provider adapters."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from phish_tool_agent.agents.contracts import CapabilityInvocation
from phish_tool_agent.orchestrator.state import Transcript


@dataclass(frozen=True)
class ReasoningReply:
    """Either a capability request or free text; both empty means an unusable reply."""

    invocation: CapabilityInvocation | None = None
    text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.invocation is None and not self.text.strip()


class ReasoningClient(Protocol):
    def complete(self, transcript: Transcript, signatures: Sequence[dict[str, Any]]) -> ReasoningReply:
        """Return the next step; raise ReasoningServiceError on transport failure."""


def transcript_to_messages(transcript: Transcript) -> list[dict[str, Any]]:
    """Render turns in the chat-completions message format."""

    messages: list[dict[str, Any]] = []
    for turn in transcript:
        if turn.role == "capability-result":
            messages.append({"role": "tool", "tool_call_id": turn.call_id, "content": turn.content})
        elif turn.role == "assistant" and turn.call_id:
            messages.append(
                {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": turn.call_id,
                            "type": "function",
                            "function": {"name": turn.name or "", "arguments": turn.arguments or "{}"},
                        }
                    ],
                }
            )
        else:
            messages.append({"role": turn.role, "content": turn.content})
    return messages


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def parse_chat_reply(response: Any) -> ReasoningReply:
    """Extract the first tool call (or legacy function call) or the text content."""

    choices = _field(response, "choices") or []
    if not choices:
        return ReasoningReply()
    message = _field(choices[0], "message")
    if message is None:
        return ReasoningReply()

    tool_calls = _field(message, "tool_calls") or []
    if tool_calls:
        call = tool_calls[0]
        function = _field(call, "function")
        return ReasoningReply(
            invocation=CapabilityInvocation(
                name=str(_field(function, "name") or ""),
                arguments=str(_field(function, "arguments") or "{}"),
                call_id=str(_field(call, "id") or ""),
            )
        )
    function_call = _field(message, "function_call")
    if function_call:
        return ReasoningReply(
            invocation=CapabilityInvocation(
                name=str(_field(function_call, "name") or ""),
                arguments=str(_field(function_call, "arguments") or "{}"),
            )
        )
    return ReasoningReply(text=str(_field(message, "content") or ""))
