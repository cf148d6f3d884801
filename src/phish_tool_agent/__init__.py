"""Function-calling phishing email analysis agent."""

__version__ = "0.1.0"
