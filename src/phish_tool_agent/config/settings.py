"""Config loader from env + yaml."""

from __future__ import annotations

from pathlib import Path
import os
from typing import Any

import yaml
from pydantic import BaseModel, Field

from phish_tool_agent.core.errors import ConfigError

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = PACKAGE_ROOT / "config" / "defaults.yaml"
ENV_PREFIX = "PHISH_AGENT_"


class AppConfig(BaseModel):

    profile: str = Field(default="openai")
    provider: str = Field(default="openai")
    model: str = Field(default="gpt-4o-mini")
    temperature: float = Field(default=0.0)
    api_base: str | None = Field(default=None)
    api_key: str | None = Field(default=None)
    max_steps: int = Field(default=8)
    link_workers: int = Field(default=8)
    batch_workers: int = Field(default=4)
    request_timeout_s: float = Field(default=60.0)
    log_level: str = Field(default="INFO")
    default_config_path: str = Field(default=str(DEFAULT_CONFIG_PATH))


def _normalize_provider(raw: Any) -> str:
    provider = str(raw or "").strip().lower()
    if provider in {"ollama", "local"}:
        return "local"
    return provider or "openai"


def load_yaml(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    try:
        payload = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {p}: {exc}") from exc
    return payload if isinstance(payload, dict) else {}


def _pick_env(name: str, fallback: Any) -> Any:
    value = os.getenv(ENV_PREFIX + name)
    return value if value not in (None, "") else fallback


def _parse_int(raw: Any, fallback: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def _parse_float(raw: Any, fallback: float) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return fallback


def _parse_str(raw: Any, fallback: str) -> str:
    value = str(raw if raw is not None else "").strip()
    return value or fallback


def _resolve_default_config_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_default_path = os.getenv(ENV_PREFIX + "DEFAULT_CONFIG_PATH")
    if env_default_path:
        return Path(env_default_path)
    return DEFAULT_CONFIG_PATH


def load_config(
    path: str | Path | None = None,
    *,
    profile_override: str | None = None,
) -> tuple[AppConfig, dict[str, Any]]:
    """Resolve settings: env var > selected profile > top-level yaml > model default."""

    default_path = _resolve_default_config_path(path)
    merged = load_yaml(default_path)
    profiles = merged.get("profiles")
    profile_map = profiles if isinstance(profiles, dict) else {}

    active_profile = str(profile_override or _pick_env("PROFILE", merged.get("profile", "openai")))
    if profile_override and profile_override not in profile_map:
        raise ConfigError(f"Unknown profile: {profile_override!r}")
    selected_profile = profile_map.get(active_profile, {})
    selected = selected_profile if isinstance(selected_profile, dict) else {}

    def _value(key: str, fallback: Any) -> Any:
        return _pick_env(key.upper(), selected.get(key, merged.get(key, fallback)))

    payload = {
        "profile": active_profile,
        "provider": _normalize_provider(_value("provider", "openai")),
        "model": _parse_str(_value("model", None), "gpt-4o-mini"),
        "temperature": _parse_float(_value("temperature", 0.0), 0.0),
        "api_base": _value("api_base", None),
        "api_key": _value("api_key", None),
        "max_steps": _parse_int(_value("max_steps", 8), 8),
        "link_workers": _parse_int(_value("link_workers", 8), 8),
        "batch_workers": _parse_int(_value("batch_workers", 4), 4),
        "request_timeout_s": _parse_float(_value("request_timeout_s", 60.0), 60.0),
        "log_level": _parse_str(_value("log_level", "INFO"), "INFO").upper(),
        "default_config_path": str(default_path),
    }
    if payload["provider"] == "openai" and not payload["api_key"]:
        payload["api_key"] = os.getenv("OPENAI_API_KEY") or None

    cfg = AppConfig.model_validate(payload)
    return cfg, merged
