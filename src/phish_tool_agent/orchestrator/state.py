"""Per-analysis state: the tool result accumulator and the conversation transcript."""

from __future__ import annotations

from collections.abc import Iterator
import copy
from dataclasses import dataclass, field
from enum import Enum
import json
from typing import Any, Literal

from phish_tool_agent.tools.intel.header_intel import default_header_result

TurnRole = Literal["system", "user", "assistant", "capability-result"]


class LoopStatus(str, Enum):
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


def seed_tool_results() -> dict[str, Any]:
    return {
        "headerAnalysis": default_header_result(),
        "domainReputation": None,
        "contentPattern": None,
        "linkReputation": None,
    }


@dataclass
class ToolResultStore:
    """Capability name -> last result. Last write wins; nothing is ever removed."""

    _results: dict[str, Any] = field(default_factory=seed_tool_results)

    def merge(self, name: str, result: Any) -> None:
        self._results[name] = copy.deepcopy(result)

    def get(self, name: str, default: Any = None) -> Any:
        return self._results.get(name, default)

    def __contains__(self, name: object) -> bool:
        return name in self._results and self._results[name] is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def as_dict(self) -> dict[str, Any]:
        return copy.deepcopy(self._results)

    def snapshot(self, *, exclude: tuple[str, ...] = ()) -> dict[str, Any]:
        """Copy of filled entries, without the names in ``exclude``."""

        return {
            name: copy.deepcopy(value)
            for name, value in self._results.items()
            if name not in exclude and value is not None
        }


@dataclass(frozen=True)
class Turn:
    role: TurnRole
    content: str
    name: str | None = None
    call_id: str | None = None
    arguments: str | None = None


@dataclass
class Transcript:
    """Append-only conversation history sent to the reasoning service."""

    turns: list[Turn] = field(default_factory=list)

    def append(self, turn: Turn) -> None:
        self.turns.append(turn)

    def add_system(self, content: str) -> None:
        self.append(Turn(role="system", content=content))

    def add_user(self, content: str) -> None:
        self.append(Turn(role="user", content=content))

    def add_assistant_text(self, content: str) -> None:
        self.append(Turn(role="assistant", content=content))

    def add_invocation(self, name: str, arguments: str, call_id: str) -> None:
        self.append(Turn(role="assistant", content="", name=name, call_id=call_id, arguments=arguments))

    def add_result(self, name: str, result: Any, call_id: str) -> None:
        content = json.dumps(result, ensure_ascii=True, default=str)
        self.append(Turn(role="capability-result", content=content, name=name, call_id=call_id))

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)
