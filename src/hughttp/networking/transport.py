"""Transport seam between the fluent client and the network.

The client only depends on the ``Transport`` protocol: given a fully built
request, perform one blocking HTTP exchange and return a Result. The default
implementation drives a ``requests.Session``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Protocol

import requests

from .config import HttpClientConfig, HttpMethod
from .errors import RequestTimeoutError, TransportError
from .types import Err, Ok, Result

_CHUNK_SIZE = 1024


@dataclass(frozen=True)
class TransportRequest:
    method: HttpMethod
    url: str
    headers: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )
    body: str | None = None
    verify_ssl: bool = True


@dataclass(frozen=True)
class TransportReply:
    status_code: int
    body: str


class Transport(Protocol):
    def send(
        self, request: TransportRequest
    ) -> Result[TransportReply, Exception]: ...


class RequestsTransport:
    """Transport backed by a requests Session.

    Redirects are followed. The body is streamed so that connect plus
    transfer stays under one total deadline (``timeout_seconds``, or the sum
    of the connect and read timeouts). Failures never raise; they come back
    as ``Err`` holding a TransportError with the underlying diagnostic text.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._clock = clock
        self._session = requests.Session()
        if self._config.user_agent:
            self._session.headers["User-Agent"] = self._config.user_agent
        self._session.headers.update(self._config.default_headers)

    def _get_timeout(self) -> float | tuple[float, float] | None:
        """Resolve timeout preference."""
        if (
            self._config.connect_timeout_seconds is not None
            and self._config.read_timeout_seconds is not None
        ):
            return (
                self._config.connect_timeout_seconds,
                self._config.read_timeout_seconds,
            )
        return self._config.timeout_seconds

    def _total_timeout(self) -> float | None:
        """Upper bound in seconds on connect plus transfer."""
        if (
            self._config.connect_timeout_seconds is not None
            and self._config.read_timeout_seconds is not None
        ):
            return (
                self._config.connect_timeout_seconds
                + self._config.read_timeout_seconds
            )
        return self._config.timeout_seconds

    def _build_meta(
        self,
        request: TransportRequest,
        response: requests.Response | None,
        timeout: float | tuple[float, float] | None,
        final_error: str | None = None,
    ) -> dict[str, Any]:
        """Construct metadata dictionary from request and response."""
        meta: dict[str, Any] = {}
        meta["method"] = request.method.value
        meta["url"] = request.url
        meta["verify_ssl"] = request.verify_ssl
        meta["timeout_s"] = timeout

        if response is not None:
            meta["status_code"] = response.status_code
            meta["url"] = response.url
            meta["reason"] = response.reason
            try:
                meta["elapsed_s"] = response.elapsed.total_seconds()
            except AttributeError:
                pass  # elapsed is missing on hand-built responses
        if final_error is not None:
            meta["final_error"] = final_error

        return meta

    def _handle_request_exception(
        self,
        request: TransportRequest,
        e: requests.exceptions.RequestException,
        timeout: float | tuple[float, float] | None,
    ) -> Result[TransportReply, Exception]:
        """Map requests exceptions to hughttp errors."""
        meta = self._build_meta(
            request, e.response, timeout, final_error=type(e).__name__
        )

        if isinstance(e, requests.exceptions.Timeout):
            return Err(RequestTimeoutError(str(e)), meta=meta)

        # ConnectionError covers refused connections and TLS failures alike.
        return Err(TransportError(str(e)), meta=meta)

    def _issue(
        self,
        request: TransportRequest,
        timeout: float | tuple[float, float] | None,
    ) -> requests.Response:
        if request.method is HttpMethod.POST:
            return self._session.post(
                request.url,
                headers=dict(request.headers),
                data=request.body,
                timeout=timeout,
                allow_redirects=True,
                stream=True,
                verify=request.verify_ssl,
            )
        return self._session.get(
            request.url,
            headers=dict(request.headers),
            timeout=timeout,
            allow_redirects=True,
            stream=True,
            verify=request.verify_ssl,
        )

    def _read_body(
        self, response: requests.Response, deadline: float | None
    ) -> bytes:
        """Collect the streamed body, failing once ``deadline`` has passed.

        A single blocking chunk read is bounded by the per-read timeout.
        """
        chunks: list[bytes] = []
        for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
            chunks.append(chunk)
            if deadline is not None and self._clock() > deadline:
                raise RequestTimeoutError(
                    f"transfer exceeded {self._total_timeout()}s "
                    f"total timeout for {response.url}"
                )
        return b"".join(chunks)

    @staticmethod
    def _decode_body(response: requests.Response, content: bytes) -> str:
        """Decode with the declared charset, or UTF-8 when none is declared.

        requests assumes ISO-8859-1 for ``text/*`` without a charset, which
        garbles UTF-8 bodies.
        """
        content_type = response.headers.get("Content-Type", "")
        encoding = "utf-8"
        if "charset=" in content_type.lower() and response.encoding:
            encoding = response.encoding
        try:
            return content.decode(encoding, errors="replace")
        except LookupError:
            return content.decode("utf-8", errors="replace")

    def send(
        self, request: TransportRequest
    ) -> Result[TransportReply, Exception]:
        """Perform one HTTP exchange.

        Args:
            request: Method, URL, headers, encoded body and SSL policy.

        Returns:
            Ok with the status code and body text, or Err with a
            TransportError when no usable response was obtained in time.
        """
        timeout = self._get_timeout()
        total = self._total_timeout()
        deadline = None if total is None else self._clock() + total
        try:
            response = self._issue(request, timeout)
        except requests.exceptions.RequestException as exc:
            return self._handle_request_exception(request, exc, timeout)

        try:
            content = self._read_body(response, deadline)
        except RequestTimeoutError as exc:
            meta = self._build_meta(
                request, response, timeout, final_error="DeadlineExceeded"
            )
            return Err(exc, meta=meta)
        except requests.exceptions.RequestException as exc:
            return self._handle_request_exception(request, exc, timeout)
        finally:
            response.close()

        meta = self._build_meta(request, response, timeout)
        if not response.status_code:
            return Err(
                TransportError(f"no HTTP status received from {request.url}"),
                meta=meta,
            )
        return Ok(
            TransportReply(
                status_code=response.status_code,
                body=self._decode_body(response, content),
            ),
            meta=meta,
        )
