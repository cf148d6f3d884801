"""Runner wrappers for the CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from phish_tool_agent.domain.email.parse import load_email_file, load_emails
from phish_tool_agent.orchestrator.build import create_agent


def _dump(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=True)


def run_once(
    path: str | Path,
    *,
    model: str | None = None,
    profile: str | None = None,
) -> str:
    agent, runtime = create_agent(profile_override=profile, model_override=model)
    result = agent.analyze(load_email_file(path))
    result["runtime"] = {key: runtime[key] for key in ("profile", "provider", "model")}
    return _dump(result)


def run_stream(
    path: str | Path,
    *,
    model: str | None = None,
    profile: str | None = None,
) -> list[str]:
    agent, _ = create_agent(profile_override=profile, model_override=model)
    return [_dump(event) for event in agent.analyze_stream(load_email_file(path))]


def run_batch(
    path: str | Path,
    *,
    model: str | None = None,
    profile: str | None = None,
    progress: bool = False,
) -> str:
    agent, runtime = create_agent(profile_override=profile, model_override=model)

    def _report(done: int, total: int) -> None:
        print(f"analyzed {done}/{total}", flush=True)

    results = agent.analyze_batch(load_emails(path), on_progress=_report if progress else None)
    return _dump({"results": results, "runtime": {key: runtime[key] for key in ("profile", "provider", "model")}})
