"""Immutable response wrapper returned by every terminal client call."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Response:
    """HTTP status code plus the raw response body."""

    status: int
    body: str

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300

    def json(self) -> dict[str, Any] | list[Any]:
        """Decode the body as JSON.

        Returns an empty dict when the body is not JSON or decodes to a
        scalar. Never raises; every call decodes afresh, so callers may mutate
        the result freely.
        """
        try:
            decoded = json.loads(self.body)
        except (TypeError, ValueError):
            return {}
        if isinstance(decoded, (dict, list)):
            return decoded
        return {}
