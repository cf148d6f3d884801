"""Email domain package."""

from phish_tool_agent.domain.email.models import REQUIRED_FIELDS, Email
from phish_tool_agent.domain.email.parse import (
    filter_complete,
    load_email_file,
    load_emails,
    parse_eml_bytes,
    parse_email_payload,
)

__all__ = [
    "REQUIRED_FIELDS",
    "Email",
    "filter_complete",
    "load_email_file",
    "load_emails",
    "parse_eml_bytes",
    "parse_email_payload",
]
