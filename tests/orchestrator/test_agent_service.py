import json

from phish_tool_agent.agents.contracts import NO_ANALYSIS_ERROR, CapabilityInvocation
from phish_tool_agent.core.errors import ReasoningServiceError
from phish_tool_agent.orchestrator.pipeline import AgentService
from phish_tool_agent.providers.base import ReasoningReply
from phish_tool_agent.tools.intel.link_intel import analyze_link
from phish_tool_agent.tools.registry import CapabilityRegistry


class PerEmailClient:
    """Answers in one step, keyed on the email id in the user turn; thread-safe."""

    def complete(self, transcript, signatures):
        payload = json.loads(transcript.turns[1].content)
        if payload["id"] == "boom":
            raise ReasoningServiceError("upstream 503")
        arguments = json.dumps({"riskScore": 80 if "bad" in payload["id"] else 5})
        return ReasoningReply(invocation=CapabilityInvocation(name="finalAnswer", arguments=arguments))


def _email(email_id: str, **overrides):
    base = {"id": email_id, "from": "a@x.com", "subject": "s", "date": "2024-01-01", "body": "b"}
    base.update(overrides)
    return base


def test_analyze_returns_camel_case_analysis(scripted_client, replies, phishing_email):
    client = scripted_client(
        [
            replies.call("headerAnalysis", {"headers": dict(phishing_email.headers)}),
            replies.call("scoreEmail", {}),
            replies.call("finalAnswer", {"isPhishing": "true", "redFlags": ["Spoofed Reply-To"]}),
        ]
    )
    result = AgentService(client=client).analyze(phishing_email)

    assert result["isPhishing"] is True
    assert result["riskScore"] == 50
    assert result["confidence"] == 0.8
    assert result["reasons"] == ["Spoofed Reply-To"]
    assert set(result["toolResults"]) == {"headerAnalysis", "scoreEmail"}


def test_analyze_returns_error_payload_when_budget_runs_out(scripted_client, replies, benign_email):
    client = scripted_client(repeat=replies.call("nope", {}))
    result = AgentService(client=client, max_steps=3).analyze(benign_email)
    assert result == {"error": NO_ANALYSIS_ERROR}
    assert len(client.calls) == 3


def test_failing_link_is_reported_conservatively(scripted_client, replies, benign_email):
    def checker(url: str):
        if "broken" in url:
            raise TimeoutError("no route")
        return analyze_link(url)

    email = benign_email.model_copy(
        update={"links": ["https://a.example/", "https://broken.example/", "https://c.example/"]}
    )
    client = scripted_client([replies.call("linkReputation", {}), replies.call("finalAnswer", {})])
    result = AgentService(client=client, registry=CapabilityRegistry(link_checker=checker)).analyze(email)

    links = result["toolResults"]["linkReputation"]
    assert len(links) == 3
    assert links[1]["url"] == "https://broken.example/"
    assert links[1]["isKnownPhishing"] is True
    assert links[1]["error"] == "TimeoutError"
    # header seed (missing auth) + phishing link + missing SSL
    assert result["riskScore"] == 55


def test_analyze_accepts_a_mapping(scripted_client, replies):
    client = scripted_client([replies.text('{"riskScore": 3, "confidence": 0.2}')])
    result = AgentService(client=client).analyze(_email("plain"))
    assert result["riskScore"] == 3
    assert result["isPhishing"] is False


def test_analyze_stream_ends_with_final_result(scripted_client, replies, benign_email):
    client = scripted_client([replies.call("finalAnswer", {"riskScore": 1, "confidence": 0.9})])
    events = list(AgentService(client=client).analyze_stream(benign_email))

    assert events[-1]["type"] == "final"
    assert events[-1]["result"]["riskScore"] == 1
    assert all(event["type"] == "trace" for event in events[:-1])


def test_batch_filters_incomplete_and_isolates_failures():
    progress: list[tuple[int, int]] = []
    service = AgentService(client=PerEmailClient(), batch_workers=3)
    results = service.analyze_batch(
        [_email("ok-1"), _email("bad-2"), _email("boom"), _email("incomplete", body="")],
        on_progress=lambda done, total: progress.append((done, total)),
    )

    assert [item["id"] for item in results] == ["ok-1", "bad-2", "boom"]
    assert results[0]["analysis"]["riskScore"] == 5
    assert results[1]["analysis"]["isPhishing"] is True
    assert results[2] == {"id": "boom", "error": "upstream 503"}
    assert sorted(progress) == [(1, 3), (2, 3), (3, 3)]


def test_batch_with_nothing_complete_returns_empty():
    assert AgentService(client=PerEmailClient()).analyze_batch([_email("x", subject="")]) == []


def test_batch_skips_malformed_records_and_keeps_the_rest():
    service = AgentService(client=PerEmailClient())
    results = service.analyze_batch(
        [
            _email("ok-1"),
            _email("bad-headers", headers={"x-priority": 1}),
            _email("bad-links", links=5),
            "not an email",
            _email("ok-2"),
        ]
    )
    assert [item["id"] for item in results] == ["ok-1", "ok-2"]
    assert all("analysis" in item for item in results)
