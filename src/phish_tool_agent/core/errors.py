"""Custom exceptions for phish-tool-agent."""


class PhishAgentError(Exception):
    """Base exception for application-level errors."""


class ConfigError(PhishAgentError):
    """Raised when configuration cannot be loaded or validated."""


class ReasoningServiceError(PhishAgentError):
    """Raised when the reasoning service call itself fails (network, auth, quota)."""


class CapabilityError(PhishAgentError):
    """Raised by a capability that cannot produce a result for its input."""


class IngestionError(PhishAgentError):
    """Raised when an email payload cannot be loaded."""
