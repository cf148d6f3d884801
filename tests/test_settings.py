import pytest

from phish_tool_agent.config.settings import DEFAULT_CONFIG_PATH, load_config
from phish_tool_agent.core.errors import ConfigError


def test_packaged_defaults_load(monkeypatch):
    monkeypatch.delenv("PHISH_AGENT_PROFILE", raising=False)
    monkeypatch.delenv("PHISH_AGENT_MODEL", raising=False)
    cfg, raw = load_config()
    assert DEFAULT_CONFIG_PATH.exists()
    assert cfg.profile == "openai"
    assert cfg.provider == "openai"
    assert cfg.max_steps == 8
    assert set(raw["profiles"]) == {"openai", "ollama"}


def test_profile_override_selects_local_provider():
    cfg, _ = load_config(profile_override="ollama")
    assert cfg.provider == "local"
    assert cfg.model.startswith("ollama/")
    assert cfg.api_base == "http://127.0.0.1:11434"


def test_unknown_profile_override_is_rejected():
    with pytest.raises(ConfigError):
        load_config(profile_override="nope")


def test_env_overrides_and_lenient_parsing(monkeypatch):
    monkeypatch.setenv("PHISH_AGENT_MODEL", "gpt-4.1-mini")
    monkeypatch.setenv("PHISH_AGENT_MAX_STEPS", "12")
    monkeypatch.setenv("PHISH_AGENT_LINK_WORKERS", "-3")
    monkeypatch.setenv("PHISH_AGENT_TEMPERATURE", "warm")
    monkeypatch.setenv("PHISH_AGENT_LOG_LEVEL", "debug")
    cfg, _ = load_config()
    assert cfg.model == "gpt-4.1-mini"
    assert cfg.max_steps == 12
    assert cfg.link_workers == 8
    assert cfg.temperature == 0.0
    assert cfg.log_level == "DEBUG"


def test_custom_config_path_from_env(monkeypatch, tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("profile: lab\nprofiles:\n  lab:\n    provider: ollama\n    model: ollama/llama3\n    max_steps: 4\n")
    monkeypatch.setenv("PHISH_AGENT_DEFAULT_CONFIG_PATH", str(path))
    monkeypatch.delenv("PHISH_AGENT_PROFILE", raising=False)
    cfg, _ = load_config()
    assert cfg.profile == "lab"
    assert cfg.provider == "local"
    assert cfg.max_steps == 4
    assert cfg.default_config_path == str(path)


def test_invalid_yaml_raises_config_error(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("profiles: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config(path)
