"""Email loading: JSON payloads, EML files, and the required-field filter."""

from __future__ import annotations

from collections.abc import Iterable
from email import policy
from email.message import Message
from email.parser import BytesParser
from email.utils import parsedate_to_datetime
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from phish_tool_agent.core.errors import IngestionError
from phish_tool_agent.domain.email.models import Email
from phish_tool_agent.domain.url.extract import extract_urls

logger = logging.getLogger(__name__)


def _decode_part(part: Message) -> str:
    payload = part.get_payload(decode=True)
    if payload is None:
        return ""
    charset = part.get_content_charset() or "utf-8"
    for name in (charset, "utf-8", "latin-1"):
        try:
            return payload.decode(name, errors="replace")
        except LookupError:
            continue
    return ""


def _extract_body_text(message: Message) -> str:
    parts = message.walk() if message.is_multipart() else [message]
    body_text: list[str] = []
    for part in parts:
        if part.get_content_maintype() == "multipart":
            continue
        content_disposition = (part.get("Content-Disposition") or "").lower()
        if "attachment" in content_disposition:
            continue
        if (part.get_content_type() or "").lower() != "text/plain":
            continue
        content = _decode_part(part)
        if content:
            body_text.append(content)
    return "\n".join(body_text)


def _iso_date(raw: str) -> str:
    if not raw:
        return ""
    try:
        return parsedate_to_datetime(raw).isoformat()
    except (TypeError, ValueError):
        return raw


def _collect_headers(message: Message) -> dict[str, str | list[str]]:
    headers: dict[str, str | list[str]] = {}
    for key, value in message.items():
        name = key.lower()
        current = headers.get(name)
        if current is None:
            headers[name] = str(value)
        elif isinstance(current, list):
            current.append(str(value))
        else:
            headers[name] = [current, str(value)]
    return headers


def parse_eml_bytes(raw: bytes, *, message_id: str = "") -> Email:
    message = BytesParser(policy=policy.default).parsebytes(raw)
    body = _extract_body_text(message)
    return Email(
        id=message_id or str(message.get("Message-ID") or ""),
        sender=str(message.get("From") or ""),
        subject=str(message.get("Subject") or ""),
        date=_iso_date(str(message.get("Date") or "")),
        body=body,
        headers=_collect_headers(message),
        links=extract_urls(body),
    )


def parse_email_payload(payload: dict[str, Any]) -> Email:
    """Build an Email from a JSON-like mapping; links default to those in the body."""

    data = dict(payload)
    if "email" in data and isinstance(data["email"], dict):
        data = dict(data["email"])
    headers = data.get("headers")
    if not isinstance(headers, dict):
        data["headers"] = {}
    if not data.get("links"):
        data["links"] = extract_urls(str(data.get("body") or ""))
    try:
        return Email.model_validate(data)
    except ValidationError as exc:
        raise IngestionError(f"Invalid email payload: {exc.error_count()} validation error(s).") from exc


def load_email_file(path: str | Path) -> Email:
    p = Path(path)
    if not p.exists():
        raise IngestionError(f"Email file not found: {p}")
    if p.suffix.lower() == ".eml":
        return parse_eml_bytes(p.read_bytes(), message_id=p.stem)
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise IngestionError(f"Email file is not valid JSON: {p}") from exc
    if not isinstance(payload, dict):
        raise IngestionError(f"Email file must hold a JSON object: {p}")
    return parse_email_payload(payload)


def load_emails(path: str | Path) -> list[Email]:
    """Load a JSON array (or ``{"emails": [...]}``) of email payloads."""

    p = Path(path)
    if not p.exists():
        raise IngestionError(f"Batch file not found: {p}")
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise IngestionError(f"Batch file is not valid JSON: {p}") from exc
    if isinstance(payload, dict):
        payload = payload.get("emails", [payload])
    if not isinstance(payload, list):
        raise IngestionError(f"Batch file must hold a list of emails: {p}")
    emails: list[Email] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            logger.warning("Skipping batch record %d: not an object.", index)
            continue
        try:
            emails.append(parse_email_payload(item))
        except IngestionError as exc:
            logger.warning("Skipping batch record %d: %s", index, exc)
    return emails


def filter_complete(emails: Iterable[Email]) -> list[Email]:
    """Drop records missing any of from/subject/date/body before analysis."""

    kept: list[Email] = []
    for email in emails:
        missing = email.missing_fields()
        if missing:
            logger.warning("Skipping email %r due to missing fields: %s", email.id, ", ".join(missing))
            continue
        kept.append(email)
    return kept
