"""Error taxonomy for the review core.

Every failure raised by the core is a CritiqueError subclass so callers can
catch one type at the boundary. The orchestrator records which step failed
on the ``step`` attribute but never changes the exception's class: a
TransportError raised while sending is still a TransportError when it
reaches the CLI.
"""

from __future__ import annotations


class CritiqueError(Exception):
    """Base class for all errors raised by codecritique_core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.step: str | None = None

    def __str__(self) -> str:
        if self.step:
            return f"{self.step}: {self.message}"
        return self.message


class ConfigError(CritiqueError):
    """Unknown provider, unsupported source or missing credential."""


class TemplateError(CritiqueError):
    """The prompt template itself is malformed."""


class TransportError(CritiqueError):
    """Non-success HTTP status or network failure."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProtocolError(CritiqueError):
    """The provider answered, but not in the shape its protocol promises."""

    def __init__(self, message: str, line: str | None = None):
        super().__init__(message)
        self.line = line


class SchemaError(CritiqueError):
    """The model's final text does not follow the review output contract."""

    def __init__(self, message: str, excerpt: str = ""):
        super().__init__(message)
        self.excerpt = excerpt


class ProviderNotImplementedError(CritiqueError, NotImplementedError):
    """A recognised provider without a backend was selected."""

    def __init__(self, provider: str):
        super().__init__(f"AI provider {provider} not implemented yet")
        self.provider = provider


class CancellationError(CritiqueError):
    """The caller's deadline expired before the provider call finished."""
