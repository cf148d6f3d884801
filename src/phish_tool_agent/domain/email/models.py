"""Email domain models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ("from", "subject", "date", "body")

HeaderValue = str | list[str]


class Email(BaseModel):
    """Structured email record handed to the orchestrator.

    Records are read-only once built; ``from`` is exposed as ``sender``
    because ``from`` is a Python keyword.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = ""
    sender: str = Field(default="", alias="from")
    subject: str = ""
    body: str = ""
    date: str = ""
    headers: dict[str, HeaderValue] = Field(default_factory=dict)
    links: list[str] = Field(default_factory=list)

    @field_validator("id", "sender", "subject", "body", "date", mode="before")
    @classmethod
    def _coerce_text(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("links", mode="before")
    @classmethod
    def _coerce_links(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if not isinstance(value, (list, tuple)):
            raise ValueError("links must be a list of URLs")
        return list(dict.fromkeys(str(item).strip() for item in value if str(item).strip()))

    def missing_fields(self) -> list[str]:
        values = {
            "from": self.sender,
            "subject": self.subject,
            "date": self.date,
            "body": self.body,
        }
        return [name for name in REQUIRED_FIELDS if not values[name].strip()]

    def has_required_fields(self) -> bool:
        return not self.missing_fields()

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)
