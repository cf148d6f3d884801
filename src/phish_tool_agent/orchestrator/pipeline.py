"""Caller-facing analysis service built on the function-calling loop."""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
import logging
from typing import Any

from phish_tool_agent.agents.contracts import AnalysisError
from phish_tool_agent.core.errors import IngestionError, ReasoningServiceError
from phish_tool_agent.domain.email.models import Email
from phish_tool_agent.domain.email.parse import filter_complete, parse_email_payload
from phish_tool_agent.orchestrator.assembler import assemble
from phish_tool_agent.orchestrator.loop import DEFAULT_MAX_STEPS, AgentLoop, LoopOutcome
from phish_tool_agent.orchestrator.tracing import TraceEvent
from phish_tool_agent.providers.base import ReasoningClient
from phish_tool_agent.tools.registry import CapabilityRegistry

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def _as_email(email: Email | Mapping[str, Any]) -> Email:
    if isinstance(email, Email):
        return email
    if not isinstance(email, Mapping):
        raise IngestionError(f"Expected an email mapping, got {type(email).__name__}.")
    return parse_email_payload(dict(email))


def _parse_records(emails: Iterable[Email | Mapping[str, Any]]) -> list[Email]:
    parsed: list[Email] = []
    for index, item in enumerate(emails):
        try:
            parsed.append(_as_email(item))
        except IngestionError as exc:
            logger.warning("Skipping batch record %d: %s", index, exc)
    return parsed


def finalize(outcome: LoopOutcome) -> dict[str, Any]:
    """Analysis payload, or the explicit error payload when nothing terminal exists."""

    if outcome.payload is None:
        logger.info("No terminal answer after %d step(s) (%s).", outcome.steps, outcome.error or outcome.status.value)
        return AnalysisError().to_payload()
    return assemble(outcome.payload, outcome.store).to_payload()


@dataclass
class AgentService:
    client: ReasoningClient
    registry: CapabilityRegistry = field(default_factory=CapabilityRegistry)
    max_steps: int = DEFAULT_MAX_STEPS
    batch_workers: int = 4

    def _loop(self) -> AgentLoop:
        return AgentLoop(client=self.client, registry=self.registry, max_steps=self.max_steps)

    def analyze(self, email: Email | Mapping[str, Any]) -> dict[str, Any]:
        """Run one analysis. Raises ReasoningServiceError only when no partial answer exists."""

        return finalize(self._loop().run(_as_email(email)))

    def analyze_stream(self, email: Email | Mapping[str, Any]) -> Generator[TraceEvent, None, None]:
        for event in self._loop().iter_run(_as_email(email)):
            if event.get("type") == "outcome":
                yield {"type": "final", "result": finalize(event["outcome"])}
                return
            yield event

    def analyze_batch(
        self,
        emails: Iterable[Email | Mapping[str, Any]],
        *,
        on_progress: ProgressCallback | None = None,
    ) -> list[dict[str, Any]]:
        """Analyze complete emails concurrently; one failure never affects the others.

        Results keep input order. Each item is ``{"id", "analysis"}`` or ``{"id", "error"}``.
        """

        candidates = filter_complete(_parse_records(emails))
        total = len(candidates)
        if not total:
            return []
        results: list[dict[str, Any] | None] = [None] * total
        done = 0

        def _one(email: Email) -> dict[str, Any]:
            try:
                return {"id": email.id, "analysis": self.analyze(email)}
            except ReasoningServiceError as exc:
                logger.error("Analysis of %r failed: %s", email.id, exc)
                return {"id": email.id, "error": str(exc)}

        workers = max(1, min(int(self.batch_workers), total))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="analyze") as pool:
            futures = {pool.submit(_one, email): index for index, email in enumerate(candidates)}
            for future in as_completed(futures):
                results[futures[future]] = future.result()
                done += 1
                if on_progress is not None:
                    on_progress(done, total)
        return [item for item in results if item is not None]
