import json

import pytest

from phish_tool_agent.core.errors import IngestionError
from phish_tool_agent.domain.email import (
    Email,
    filter_complete,
    load_email_file,
    load_emails,
    parse_eml_bytes,
    parse_email_payload,
)

RAW_EML = (
    b"From: Billing <billing@pay-update.example>\r\n"
    b"To: user@example.com\r\n"
    b"Reply-To: refunds@other.example\r\n"
    b"Received: from a\r\n"
    b"Received: from b\r\n"
    b"Subject: Invoice overdue\r\n"
    b"Date: Wed, 01 May 2024 10:00:00 +0000\r\n"
    b"Message-ID: <abc@pay-update.example>\r\n"
    b"Content-Type: text/plain; charset=utf-8\r\n"
    b"\r\n"
    b"Pay now at http://pay-update.example/invoice.\r\n"
)


def test_parse_eml_bytes_extracts_fields_and_links():
    email = parse_eml_bytes(RAW_EML)
    assert email.sender == "Billing <billing@pay-update.example>"
    assert email.subject == "Invoice overdue"
    assert email.date.startswith("2024-05-01T10:00:00")
    assert email.links == ["http://pay-update.example/invoice"]
    assert email.headers["received"] == ["from a", "from b"]
    assert email.headers["reply-to"] == "refunds@other.example"
    assert email.has_required_fields()


def test_payload_uses_from_alias_and_defaults_links_from_body():
    email = parse_email_payload(
        {"email": {"from": "a@x.com", "subject": "s", "date": "d", "body": "go to https://x.com/a, now"}}
    )
    assert email.sender == "a@x.com"
    assert email.links == ["https://x.com/a"]
    assert email.to_payload()["from"] == "a@x.com"


def test_invalid_payload_raises_ingestion_error():
    with pytest.raises(IngestionError):
        parse_email_payload({"from": "a@x.com", "headers": {"x": {"nested": 1}}})


def test_filter_complete_drops_records_missing_required_fields():
    complete = Email.model_validate({"from": "a@x.com", "subject": "s", "date": "d", "body": "b"})
    missing_body = Email.model_validate({"from": "a@x.com", "subject": "s", "date": "d", "body": "  "})
    missing_from = Email.model_validate({"subject": "s", "date": "d", "body": "b"})
    assert filter_complete([complete, missing_body, missing_from]) == [complete]
    assert missing_body.missing_fields() == ["body"]


def test_load_email_file_handles_json_and_eml(tmp_path):
    eml_path = tmp_path / "sample.eml"
    eml_path.write_bytes(RAW_EML)
    assert load_email_file(eml_path).id == "sample"

    json_path = tmp_path / "sample.json"
    json_path.write_text(json.dumps({"from": "a@x.com", "subject": "s", "date": "d", "body": "b"}))
    assert load_email_file(json_path).subject == "s"

    with pytest.raises(IngestionError):
        load_email_file(tmp_path / "missing.json")


def test_load_emails_accepts_list_or_wrapper(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps({"emails": [{"from": "a@x.com"}, {"from": "b@x.com"}, "skip"]}))
    assert [item.sender for item in load_emails(path)] == ["a@x.com", "b@x.com"]

    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(IngestionError):
        load_emails(bad)


def test_non_list_links_raise_ingestion_error():
    with pytest.raises(IngestionError):
        parse_email_payload({"from": "a@x.com", "subject": "s", "date": "d", "body": "b", "links": 5})


def test_load_emails_skips_malformed_records(tmp_path):
    path = tmp_path / "batch.json"
    path.write_text(
        json.dumps(
            [
                {"from": "a@x.com", "headers": {"x-priority": 1}},
                {"from": "b@x.com", "links": 5},
                {"from": "c@x.com"},
            ]
        )
    )
    assert [item.sender for item in load_emails(path)] == ["c@x.com"]
