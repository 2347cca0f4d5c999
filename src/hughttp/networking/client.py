"""Fluent synchronous HTTP client.

Callers configure a request step by step and finish with a terminal call::

    response = (
        HttpClient()
        .to("https://api.example.com/posts")
        .send_json({"title": "hello"})
        .with_rate_limit(10, "minute")
        .post()
    )

Every terminal call runs the same pipeline on the calling thread: mock lookup,
rate limiting, transport dispatch, optional debug output and response
wrapping.
"""

from __future__ import annotations

import copy
import dataclasses
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Callable, Mapping, Type, TypeVar

from .config import (
    HttpClientConfig,
    HttpMethod,
    RateLimitPolicy,
    RatePeriod,
    RequestConfig,
)
from .errors import TransportError
from .mocks import MockRegistry
from .rate_limiter import RateLimiter
from .response import Response
from .schema import SchemaTransformer
from .transport import RequestsTransport, Transport, TransportRequest
from .types import Err

logger = logging.getLogger("hughttp.client")

Target = TypeVar("Target")


def _encode_body(body: Any) -> str:
    return json.dumps(body, separators=(",", ":"))


class HttpClient:
    """Fluent HTTP request builder and executor.

    Setters return the client itself so calls can be chained. The request
    under construction lives in an immutable RequestConfig that each setter
    replaces, so a dispatch always works from one consistent snapshot.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        transport: Transport | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Create a new HttpClient.

        Args:
            config: Client-wide timeouts and default headers.
            transport: Replacement for the requests-backed transport.
            clock: Monotonic clock used by the rate limiter.
            sleep: Blocking sleep used by the rate limiter.
        """
        self._config = config or HttpClientConfig()
        self._transport = transport or RequestsTransport(self._config)
        self._request = RequestConfig()
        self._rate_limit: RateLimitPolicy | None = None
        self._rate_limiter = RateLimiter(
            clock=clock,
            sleep=sleep,
            max_backoff_seconds=self._config.max_backoff_seconds,
        )
        self._mocks = MockRegistry()
        self._debug = False

    @property
    def request_config(self) -> RequestConfig:
        return self._request

    @property
    def rate_limit(self) -> RateLimitPolicy | None:
        return self._rate_limit

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    @property
    def mocks(self) -> MockRegistry:
        return self._mocks

    def to(self, url: str) -> HttpClient:
        """Set the target URL."""
        self._request = dataclasses.replace(self._request, url=url)
        return self

    def with_header(self, name: str, value: str) -> HttpClient:
        """Add or replace a request header."""
        self._request = self._request.with_header(name, value)
        return self

    def send_json(self, data: Any) -> HttpClient:
        """Use ``data`` as the JSON request body.

        The data is copied now and encoded at dispatch time. Sets
        ``Content-Type: application/json``.
        """
        self._request = dataclasses.replace(
            self._request, body=copy.deepcopy(data)
        ).with_header("Content-Type", "application/json")
        return self

    def without_ssl_certificate(self, disable: bool = True) -> HttpClient:
        """Configure SSL certificate verification.

        Args:
            disable: True (default) turns certificate and hostname
                verification off; False keeps it on.
        """
        self._request = dataclasses.replace(
            self._request, verify_ssl=not disable
        )
        return self

    def with_rate_limit(
        self, max_requests: int, period: str | RatePeriod = RatePeriod.SECOND
    ) -> HttpClient:
        """Limit dispatches to ``max_requests`` per second, minute or hour.

        The policy is checked when a request is dispatched; an unknown period
        fails there with InvalidConfiguration.
        """
        self._rate_limit = RateLimitPolicy(
            max_requests=max_requests, period=period
        )
        return self

    def debug(self, enabled: bool = True) -> HttpClient:
        """Print ``[METHOD] URL (STATUS, DURATIONms)`` after each dispatch."""
        self._debug = enabled
        return self

    def mock(
        self, url: str, response: Response | Mapping[str, Any]
    ) -> HttpClient:
        """Serve ``response`` for ``url`` without touching the network."""
        self._mocks.register(url, response)
        return self

    def get(self) -> Response:
        """Execute a GET request.

        Raises:
            TransportError: the request failed or returned no status.
            InvalidConfiguration: the rate limit policy is invalid.
        """
        self._request = dataclasses.replace(
            self._request, method=HttpMethod.GET
        )
        return self._send(self._request)

    def post(self) -> Response:
        """Execute a POST request.

        Raises:
            TransportError: the request failed or returned no status.
            InvalidConfiguration: the rate limit policy is invalid.
        """
        self._request = dataclasses.replace(
            self._request, method=HttpMethod.POST
        )
        return self._send(self._request)

    def validate_schema(
        self, schema_path: str | Path, target_type: Type[Target]
    ) -> Target:
        """Dispatch, validate the JSON body and bind it onto ``target_type``.

        Uses the method of the most recent ``get``/``post`` call (GET by
        default).

        Raises:
            TransportError: the request failed.
            SchemaNotFound: ``schema_path`` does not exist.
            SchemaValidationError: the body does not match the schema.
        """
        response = self._send(self._request)
        return SchemaTransformer(schema_path).transform(
            response.json(), target_type
        )

    def _build_transport_request(
        self, request: RequestConfig
    ) -> TransportRequest:
        body: str | None = None
        # Only POST carries a body; empty payloads are not sent.
        if request.method is HttpMethod.POST and request.body not in (
            None,
            {},
            [],
        ):
            body = _encode_body(request.body)
        return TransportRequest(
            method=request.method,
            url=request.url,
            headers=request.headers,
            body=body,
            verify_ssl=request.verify_ssl,
        )

    def _send(self, request: RequestConfig) -> Response:
        mocked = self._mocks.lookup(request.url)
        if mocked is not None:
            logger.debug("Serving mocked response for %s", request.url)
            return mocked

        if self._rate_limit is not None:
            self._rate_limiter.admit(self._rate_limit)

        transport_request = self._build_transport_request(request)
        started = time.perf_counter()
        result = self._transport.send(transport_request)

        if isinstance(result, Err):
            logger.debug("Request failed: %s", dict(result.meta))
            error = result.error
            if isinstance(error, TransportError):
                raise error
            raise TransportError(str(error)) from error

        reply = result.value
        if not reply.status_code:
            raise TransportError(
                f"no HTTP status received from {request.url}"
            )

        duration_ms = (time.perf_counter() - started) * 1000
        logger.debug("Request completed: %s", dict(result.meta))
        if self._debug:
            print(
                f"[{request.method.value}] {request.url} "
                f"({reply.status_code}, {duration_ms:.2f}ms)",
                file=sys.stdout,
            )

        return Response(status=reply.status_code, body=reply.body)
