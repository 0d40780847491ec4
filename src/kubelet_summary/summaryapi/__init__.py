"""Kubelet summary API client package.

Provides a small HTTP client for the kubelet ``/stats/summary/`` endpoint
that returns validated summary types without interpreting them. What to
do with the statistics is left to the caller.

Exports:
    SummaryClient: Blocking HTTP client over an injected httpx transport.
    AsyncSummaryClient: Asyncio variant of SummaryClient.
    SummaryFetcher: Protocol for anything able to fetch a summary.
    is_not_found: Tell "node has no summary endpoint" apart from failures.
    types: Module containing Pydantic models for the summary payload.
    DEFAULT_PORT: Default kubelet port.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
"""

from . import types
from .client import (
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    SUMMARY_PATH,
    AsyncSummaryClient,
    SummaryClient,
    SummaryFetcher,
    build_summary_url,
)
from .errors import (
    DecodeError,
    HTTPStatusError,
    NotFoundError,
    SummaryError,
    TransportError,
    is_not_found,
)

__all__ = [
    "DEFAULT_PORT",
    "DEFAULT_TIMEOUT",
    "SUMMARY_PATH",
    "AsyncSummaryClient",
    "DecodeError",
    "HTTPStatusError",
    "NotFoundError",
    "SummaryClient",
    "SummaryError",
    "SummaryFetcher",
    "TransportError",
    "build_summary_url",
    "is_not_found",
    "types",
]
