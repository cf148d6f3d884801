"""Build and wire the analysis service from configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from phish_tool_agent.config.settings import load_config
from phish_tool_agent.orchestrator.pipeline import AgentService
from phish_tool_agent.providers import ProviderConfig, ReasoningClient, build_reasoning_client
from phish_tool_agent.tools.registry import CapabilityRegistry


def create_agent(
    *,
    profile_override: str | None = None,
    model_override: str | None = None,
    config_path: str | Path | None = None,
    client: ReasoningClient | None = None,
) -> tuple[AgentService, dict[str, Any]]:
    env_cfg, yaml_cfg = load_config(config_path, profile_override=profile_override)
    active_model = model_override or env_cfg.model
    profiles = yaml_cfg.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}

    if client is None:
        client = build_reasoning_client(
            ProviderConfig(
                provider=env_cfg.provider,
                model=active_model,
                api_base=env_cfg.api_base,
                api_key=env_cfg.api_key,
                temperature=env_cfg.temperature,
                timeout_s=env_cfg.request_timeout_s,
            )
        )
    agent = AgentService(
        client=client,
        registry=CapabilityRegistry(link_workers=env_cfg.link_workers),
        max_steps=env_cfg.max_steps,
        batch_workers=env_cfg.batch_workers,
    )
    runtime = {
        "profile": env_cfg.profile,
        "profile_choices": [str(item) for item in profile_map.keys() if str(item).strip()],
        "provider": env_cfg.provider,
        "model": active_model,
        "temperature": env_cfg.temperature,
        "api_base": env_cfg.api_base,
        "max_steps": env_cfg.max_steps,
        "link_workers": env_cfg.link_workers,
        "batch_workers": env_cfg.batch_workers,
        "log_level": env_cfg.log_level,
        "capabilities": [item["function"]["name"] for item in agent.registry.signatures()],
    }
    return agent, runtime
