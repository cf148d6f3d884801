"""Bounded function-calling loop between the reasoning service and the capabilities."""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass, field
import json
import logging
from typing import Any

from phish_tool_agent.agents.contracts import CapabilityInvocation
from phish_tool_agent.agents.prompts import SYSTEM_PROMPT, build_user_prompt
from phish_tool_agent.core.errors import ReasoningServiceError
from phish_tool_agent.domain.email.models import Email
from phish_tool_agent.orchestrator.state import LoopStatus, ToolResultStore, Transcript
from phish_tool_agent.orchestrator.tracing import TraceEvent, make_event
from phish_tool_agent.providers.base import ReasoningClient
from phish_tool_agent.tools.intel.link_intel import distinct_links
from phish_tool_agent.tools.registry import (
    CapabilityArgs,
    CapabilityKind,
    CapabilityRegistry,
    LinkReputationArgs,
    ScoreEmailArgs,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 8
TERMINAL_NAME = CapabilityKind.FINAL_ANSWER.value


@dataclass
class LoopOutcome:
    """Where the loop stopped and what it collected.

    ``payload`` is the terminal capability's arguments (a dict), the free-text
    answer (a str), or None when nothing terminal was produced.
    """

    status: LoopStatus
    payload: dict[str, Any] | str | None
    store: ToolResultStore
    transcript: Transcript
    steps: int
    error: str | None = None


def parse_raw_arguments(raw: str | None, *, name: str = "") -> dict[str, Any]:
    """Decode the JSON argument string; anything unusable becomes ``{}``."""

    text = (raw or "").strip()
    if not text:
        return {}
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed arguments for %s (%s); using {}.", name or "capability", exc.msg)
        return {}
    if not isinstance(value, dict):
        logger.warning("Arguments for %s are not an object; using {}.", name or "capability")
        return {}
    return value


@dataclass
class AgentLoop:
    client: ReasoningClient
    registry: CapabilityRegistry = field(default_factory=CapabilityRegistry)
    max_steps: int = DEFAULT_MAX_STEPS

    def _seed_transcript(self, email: Email) -> Transcript:
        transcript = Transcript()
        transcript.add_system(SYSTEM_PROMPT)
        transcript.add_user(json.dumps(build_user_prompt(email.to_payload()), ensure_ascii=True))
        return transcript

    def _prepare_arguments(
        self,
        kind: CapabilityKind,
        raw: dict[str, Any],
        email: Email,
        store: ToolResultStore,
    ) -> CapabilityArgs:
        if kind is CapabilityKind.SCORE_EMAIL:
            return ScoreEmailArgs(toolResults=store.snapshot(exclude=(TERMINAL_NAME,)))
        args = self.registry.parse_arguments(kind, raw)
        if kind is CapabilityKind.LINK_REPUTATION and isinstance(args, LinkReputationArgs):
            return LinkReputationArgs(urls=distinct_links([*args.targets(), *email.links]))
        return args

    def _execute(
        self,
        invocation: CapabilityInvocation,
        call_id: str,
        email: Email,
        store: ToolResultStore,
        transcript: Transcript,
    ) -> tuple[CapabilityKind | None, Any, str | None]:
        """Run one capability request; return (kind, result, error)."""

        transcript.add_invocation(invocation.name, invocation.arguments, call_id)
        kind = self.registry.resolve(invocation.name)
        if kind is None:
            logger.warning("Unknown capability requested: %r", invocation.name)
            error = f"Unknown capability: {invocation.name}"
            transcript.add_result(invocation.name, {"error": error}, call_id)
            return None, None, error

        raw = parse_raw_arguments(invocation.arguments, name=kind.value)
        args = self._prepare_arguments(kind, raw, email, store)
        try:
            result = self.registry.dispatch(kind, args)
        except Exception as exc:  # noqa: BLE001 - a failing capability must not end the run
            logger.warning("Capability %s failed: %s", kind.value, exc)
            error = f"{type(exc).__name__}: {exc}"
            transcript.add_result(kind.value, {"error": error}, call_id)
            return kind, None, error

        transcript.add_result(kind.value, result, call_id)
        store.merge(kind.value, result)
        return kind, result, None

    def iter_run(self, email: Email) -> Generator[TraceEvent, None, LoopOutcome]:
        """Drive the loop, yielding trace events; the final event carries the outcome."""

        store = ToolResultStore()
        transcript = self._seed_transcript(email)
        signatures = self.registry.signatures()
        terminal: dict[str, Any] | str | None = None
        status = LoopStatus.RUNNING
        error: str | None = None
        steps = 0

        while status is LoopStatus.RUNNING:
            if steps >= self.max_steps:
                status = LoopStatus.FAILED
                error = "step budget exhausted"
                yield make_event("loop", "failed", f"Step budget of {self.max_steps} exhausted.")
                break
            steps += 1
            yield make_event("reasoning", "running", f"Reasoning step {steps}.", {"step": steps})
            try:
                reply = self.client.complete(transcript, signatures)
            except ReasoningServiceError as exc:
                # a terminal payload always ends the loop, so no partial answer exists here
                yield make_event("reasoning", "failed", "Reasoning service failed.", {"error": str(exc)})
                raise

            if reply.invocation is not None:
                call_id = reply.invocation.call_id or f"call_{steps}"
                kind, result, call_error = self._execute(reply.invocation, call_id, email, store, transcript)
                yield make_event(
                    "capability",
                    "failed" if call_error else "done",
                    f"{reply.invocation.name} {'failed' if call_error else 'completed'}.",
                    {"name": reply.invocation.name, "result": result, "error": call_error},
                )
                if kind is not None and kind.is_terminal and call_error is None:
                    terminal = result if isinstance(result, dict) else {}
                    status = LoopStatus.DONE
            elif reply.text.strip():
                transcript.add_assistant_text(reply.text)
                terminal = reply.text
                status = LoopStatus.DONE
                yield make_event("reasoning", "done", "Free-text answer treated as final.")
            else:
                status = LoopStatus.FAILED
                error = "empty reply"
                yield make_event("reasoning", "failed", "Empty reply from reasoning service.")

        outcome = LoopOutcome(
            status=status,
            payload=terminal,
            store=store,
            transcript=transcript,
            steps=steps,
            error=error,
        )
        yield {"type": "outcome", "outcome": outcome}
        return outcome

    def run(self, email: Email) -> LoopOutcome:
        events = self.iter_run(email)
        while True:
            try:
                next(events)
            except StopIteration as stop:
                return stop.value
