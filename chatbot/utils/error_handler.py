"""Error handling utilities and custom exceptions."""

from __future__ import annotations


class ChatError(Exception):
    """Exception raised when a chat turn fails to get a response.

    The lower-level cause (network failure, malformed payload, service
    error) is chained as ``__cause__`` for diagnostics.
    """

    pass


class ConfigurationError(ValueError):
    """Raised for an unknown preset or a malformed configuration override."""

    pass


class TemplateNotFoundError(LookupError):
    """Raised when the active prompt template cannot be resolved at send time."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Prompt template {name!r} is not registered")
        self.name = name
