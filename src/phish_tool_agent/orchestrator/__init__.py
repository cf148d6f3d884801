"""Agent orchestration: loop, result assembly, and the caller-facing service.

Exports are loaded lazily to avoid import-time cycles with the provider package.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from phish_tool_agent.orchestrator.build import create_agent
    from phish_tool_agent.orchestrator.loop import AgentLoop, LoopOutcome
    from phish_tool_agent.orchestrator.pipeline import AgentService

__all__ = ["AgentLoop", "AgentService", "LoopOutcome", "create_agent"]


def __getattr__(name: str) -> Any:
    if name == "create_agent":
        from phish_tool_agent.orchestrator.build import create_agent

        return create_agent
    if name == "AgentService":
        from phish_tool_agent.orchestrator.pipeline import AgentService

        return AgentService
    if name in {"AgentLoop", "LoopOutcome"}:
        from phish_tool_agent.orchestrator.loop import AgentLoop, LoopOutcome

        return {"AgentLoop": AgentLoop, "LoopOutcome": LoopOutcome}[name]
    raise AttributeError(name)
