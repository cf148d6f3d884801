from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from phish_tool_agent.agents.contracts import CapabilityInvocation
from phish_tool_agent.core.errors import ReasoningServiceError
from phish_tool_agent.domain.email.models import Email
from phish_tool_agent.providers.base import ReasoningReply


def call(name: str, arguments: object = None, *, raw: str | None = None) -> ReasoningReply:
    """Reply that requests ``name``; ``raw`` bypasses JSON encoding for malformed input."""

    payload = raw if raw is not None else json.dumps(arguments or {})
    return ReasoningReply(invocation=CapabilityInvocation(name=name, arguments=payload))


def text(content: str) -> ReasoningReply:
    return ReasoningReply(text=content)


class ScriptedClient:
    """Fake reasoning service replaying a fixed list of replies (or raising)."""

    def __init__(self, replies: list[object] | None = None, *, repeat: ReasoningReply | None = None) -> None:
        self.replies = list(replies or [])
        self.repeat = repeat
        self.calls: list[int] = []
        self.signatures: list[dict[str, object]] = []

    def complete(self, transcript, signatures):
        self.calls.append(len(transcript))
        self.signatures = list(signatures)
        if self.replies:
            reply = self.replies.pop(0)
        elif self.repeat is not None:
            reply = self.repeat
        else:
            reply = ReasoningReply()
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def scripted_client():
    return ScriptedClient


@pytest.fixture
def replies():
    return SimpleNamespace(call=call, text=text)


@pytest.fixture
def transport_error():
    return ReasoningServiceError("connection reset")


@pytest.fixture
def phishing_email() -> Email:
    return Email.model_validate(
        {
            "id": "msg-1",
            "from": "Security Team <alerts@temp-mail.org>",
            "subject": "URGENT: verify your account",
            "date": "2024-05-01T10:00:00Z",
            "body": "Dear valued customer, click here to verify your account: http://bit.ly/abc",
            "headers": {
                "From": "alerts@temp-mail.org",
                "Reply-To": "collect@evil.example",
                "Authentication-Results": "mx.example; spf=fail",
            },
            "links": ["http://bit.ly/abc", "https://example.com/login"],
        }
    )


@pytest.fixture
def benign_email() -> Email:
    return Email.model_validate(
        {
            "id": "msg-2",
            "from": "friend@gmail.com",
            "subject": "Lunch on Friday",
            "date": "2024-05-02T12:00:00Z",
            "body": "See you at noon.",
            "headers": {
                "From": "friend@gmail.com",
                "Authentication-Results": "spf=pass dkim=pass dmarc=pass",
            },
        }
    )
