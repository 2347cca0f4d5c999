"""Error hierarchy for the hughttp networking layer."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class HttpClientError(Exception):
    """Base class for every error raised by the client."""


class TransportError(HttpClientError):
    """The HTTP exchange failed or produced no usable status."""

    def __init__(self, diagnostic: str) -> None:
        super().__init__(f"HTTP request failed: {diagnostic}")
        self.diagnostic = diagnostic


class RequestTimeoutError(TransportError):
    """The exchange exceeded the configured timeout."""


class InvalidConfiguration(HttpClientError, ValueError):
    """A request setting cannot be honoured at dispatch time."""


class SchemaNotFound(HttpClientError):
    """The schema document does not exist."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(f"Schema file not found: {path}")
        self.path = Path(path)


class SchemaValidationError(HttpClientError):
    """A decoded response does not conform to its schema."""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        super().__init__(
            "Schema validation failed: " + "; ".join(self.messages)
        )
