"""Canned responses keyed by URL, consulted before any network call."""

from __future__ import annotations

import json
from threading import Lock
from typing import Any, Mapping

from .response import Response


def _as_response(response: Response | Mapping[str, Any]) -> Response:
    if isinstance(response, Response):
        return response
    if not isinstance(response, Mapping):
        raise TypeError(
            "mock response must be a Response or a mapping, "
            f"got {type(response).__name__}"
        )
    status = int(response.get("status", 200))
    body = response.get("body", "")
    if not isinstance(body, str):
        body = json.dumps(body)
    return Response(status=status, body=body)


class MockRegistry:
    """Thread-safe URL to Response table."""

    def __init__(self) -> None:
        self._responses: dict[str, Any] = {}
        self._lock = Lock()

    def register(self, url: str, response: Any) -> None:
        """Register a canned response for ``url``, replacing any earlier one.

        ``response`` is either a Response or a mapping with ``status``
        (default 200) and ``body``; a non-string body is JSON encoded. A
        mapping is copied now and converted on lookup, so registering never
        fails.
        """
        if isinstance(response, Mapping):
            response = dict(response)
        with self._lock:
            self._responses[url] = response

    def lookup(self, url: str) -> Response | None:
        """Return the canned response for ``url``, if any.

        Raises:
            ValueError: the registered status is not an integer.
            TypeError: the registered body cannot be JSON encoded, or the
                entry is neither a Response nor a mapping.
        """
        with self._lock:
            entry = self._responses.get(url)
        if entry is None:
            return None
        return _as_response(entry)

    def clear(self) -> None:
        with self._lock:
            self._responses.clear()

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._responses

    def __len__(self) -> int:
        with self._lock:
            return len(self._responses)
