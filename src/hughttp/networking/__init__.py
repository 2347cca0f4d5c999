"""Networking layer: fluent client, transport, rate limiting and schemas."""

from .client import HttpClient
from .config import (
    HttpClientConfig,
    HttpMethod,
    RateLimitPolicy,
    RatePeriod,
    RequestConfig,
)
from .errors import (
    HttpClientError,
    InvalidConfiguration,
    RequestTimeoutError,
    SchemaNotFound,
    SchemaValidationError,
    TransportError,
)
from .mocks import MockRegistry
from .rate_limiter import RateLimiter
from .response import Response
from .schema import SchemaTransformer
from .transport import RequestsTransport, TransportReply, TransportRequest

__all__ = [
    "HttpClient",
    "HttpClientConfig",
    "HttpClientError",
    "HttpMethod",
    "InvalidConfiguration",
    "MockRegistry",
    "RateLimitPolicy",
    "RateLimiter",
    "RatePeriod",
    "RequestConfig",
    "RequestTimeoutError",
    "RequestsTransport",
    "Response",
    "SchemaNotFound",
    "SchemaTransformer",
    "SchemaValidationError",
    "TransportError",
    "TransportReply",
    "TransportRequest",
]
