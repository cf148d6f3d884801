import json

from phish_tool_agent import cli
from phish_tool_agent.agents.contracts import CapabilityInvocation
from phish_tool_agent.app import run as run_module
from phish_tool_agent.orchestrator.build import create_agent
from phish_tool_agent.providers.base import ReasoningReply


class _FinalOnlyClient:
    def complete(self, transcript, signatures):
        return ReasoningReply(
            invocation=CapabilityInvocation(name="finalAnswer", arguments='{"riskScore": 7, "confidence": 0.6}')
        )


def _fake_create_agent(**kwargs):
    return create_agent(client=_FinalOnlyClient(), **kwargs)


def _write_email(tmp_path):
    path = tmp_path / "email.json"
    path.write_text(json.dumps({"from": "a@x.com", "subject": "s", "date": "d", "body": "b"}))
    return path


def test_run_once_prints_analysis_and_runtime(monkeypatch, tmp_path):
    monkeypatch.setattr(run_module, "create_agent", _fake_create_agent)
    result = json.loads(run_module.run_once(_write_email(tmp_path), profile="ollama"))
    assert result["riskScore"] == 7
    assert result["runtime"]["provider"] == "local"


def test_run_batch_reports_each_email(monkeypatch, tmp_path):
    monkeypatch.setattr(run_module, "create_agent", _fake_create_agent)
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps(
            [
                {"id": "1", "from": "a@x.com", "subject": "s", "date": "d", "body": "b"},
                {"id": "2", "from": "a@x.com", "subject": "", "date": "d", "body": "b"},
            ]
        )
    )
    result = json.loads(run_module.run_batch(path))
    assert [item["id"] for item in result["results"]] == ["1"]


def test_main_streams_events(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(run_module, "create_agent", _fake_create_agent)
    assert cli.main(["--email", str(_write_email(tmp_path)), "--stream"]) == 0
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert lines[-1]["type"] == "final"
    assert lines[-1]["result"]["confidence"] == 0.6


def test_main_reports_missing_file(tmp_path, capsys):
    assert cli.main(["--email", str(tmp_path / "missing.json")]) == 1
    assert "Email file not found" in capsys.readouterr().err
