"""Configuration models for the HttpClient and the requests it builds."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


def _default_headers() -> Mapping[str, str]:
    """Return immutable empty default headers mapping."""

    return MappingProxyType({})


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class RatePeriod(str, Enum):
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"


@dataclass(frozen=True)
class HttpClientConfig:
    """Client-wide settings shared by every request a client dispatches.

    The transport timeout defaults to 10 seconds for connect plus transfer;
    with a connect/read pair the total bound is their sum.
    """

    user_agent: str | None = None
    default_headers: Mapping[str, str] = field(default_factory=_default_headers)
    timeout_seconds: float | None = 10.0
    connect_timeout_seconds: float | None = None
    read_timeout_seconds: float | None = None
    max_backoff_seconds: float = 10.0

    def __post_init__(self) -> None:
        if self.max_backoff_seconds < 0:
            raise ValueError("max_backoff_seconds must be >= 0")

        has_connect_timeout = self.connect_timeout_seconds is not None
        has_read_timeout = self.read_timeout_seconds is not None
        if has_connect_timeout != has_read_timeout:
            raise ValueError(
                "connect_timeout_seconds and read_timeout_seconds "
                "must be set together"
            )
        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0 when provided")
        if (
            self.connect_timeout_seconds is not None
            and self.connect_timeout_seconds <= 0
        ):
            raise ValueError(
                "connect_timeout_seconds must be > 0 when provided"
            )
        if (
            self.read_timeout_seconds is not None
            and self.read_timeout_seconds <= 0
        ):
            raise ValueError("read_timeout_seconds must be > 0 when provided")

        # Freeze copied headers to avoid post-init mutation side effects.
        object.__setattr__(
            self,
            "default_headers",
            MappingProxyType(dict(self.default_headers)),
        )


@dataclass(frozen=True)
class RequestConfig:
    """Snapshot of one request as accumulated by the builder.

    A builder replaces its RequestConfig on every setter call, so a dispatch
    that holds a reference keeps seeing the values it started with.
    """

    url: str = ""
    method: HttpMethod = HttpMethod.GET
    headers: Mapping[str, str] = field(default_factory=_default_headers)
    body: Any | None = None
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method))
        object.__setattr__(
            self, "headers", MappingProxyType(dict(self.headers))
        )

    def with_header(self, name: str, value: str) -> RequestConfig:
        """Return a copy with ``name`` set to ``value`` (last write wins)."""
        headers = dict(self.headers)
        headers[name] = value
        return RequestConfig(
            url=self.url,
            method=self.method,
            headers=headers,
            body=self.body,
            verify_ssl=self.verify_ssl,
        )


@dataclass(frozen=True)
class RateLimitPolicy:
    """At most ``max_requests`` dispatches per rolling ``period``.

    Values are checked by the rate limiter when a dispatch is attempted, not
    here.
    """

    max_requests: int
    period: str | RatePeriod = RatePeriod.SECOND
