"""hughttp: a fluent HTTP client with mocking, rate limiting and schemas."""

from .networking import *  # noqa: F401,F403
from .networking import __all__

__version__ = "0.1.0"
