"""Kubelet summary API client.

Fetches ``/stats/summary/`` from a single kubelet through an injected
httpx transport and validates the payload using Pydantic models. Every
outcome other than a decoded summary is raised as one of the errors in
:mod:`.errors`.
"""

import ipaddress
import string
import time
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

import httpx
import pydantic
import structlog

from . import errors
from .types import Summary

if TYPE_CHECKING:
    from ..config import ClientConfig

logger = structlog.get_logger(__name__)

# Secure port the kubelet serves its API on
DEFAULT_PORT = 10250

DEFAULT_TIMEOUT = 30.0

SUMMARY_PATH = "/stats/summary/"

_INVALID_HOST_CHARS = frozenset("/?#@[]\\%") | frozenset(string.whitespace)

_ClientT = TypeVar("_ClientT", bound="_BaseSummaryClient")


@runtime_checkable
class SummaryFetcher(Protocol):
    """Knows how to fetch summary metrics from a kubelet."""

    def get_summary(self, host: str) -> Summary:
        """Fetch summary metrics from the kubelet running on ``host``."""
        ...


def build_summary_url(host: str, port: int, use_insecure_scheme: bool = False) -> str:
    """Build the summary endpoint URL for a kubelet.

    Args:
        host: IP address or DNS name of the node.
        port: Kubelet port.
        use_insecure_scheme: Use plain ``http`` instead of ``https``.

    Returns:
        URL of the form ``<scheme>://<host>:<port>/stats/summary/``.

    Raises:
        ValueError: If host is empty or would change the URL beyond its
            authority (path, query, fragment or userinfo characters).
    """
    if not host:
        msg = "host cannot be empty"
        raise ValueError(msg)

    bare = host.removeprefix("[").removesuffix("]")
    if ":" in bare:
        # IPv6 literals must be bracketed before a port can follow them
        try:
            ipaddress.IPv6Address(bare)
        except ValueError as exc:
            msg = f"invalid kubelet host {host!r}"
            raise ValueError(msg) from exc
        host = f"[{bare}]"
    elif _INVALID_HOST_CHARS.intersection(host):
        msg = f"invalid kubelet host {host!r}"
        raise ValueError(msg)

    scheme = "http" if use_insecure_scheme else "https"
    return f"{scheme}://{host}:{port}{SUMMARY_PATH}"


def _read_failed(exc: Exception) -> errors.DecodeError:
    return errors.DecodeError(f"failed to read response body - {exc}")


def _read_body(response: httpx.Response) -> bytes:
    try:
        return response.read()
    except httpx.HTTPError as exc:
        raise _read_failed(exc) from exc
    finally:
        response.close()


async def _aread_body(response: httpx.Response) -> bytes:
    try:
        return await response.aread()
    except httpx.HTTPError as exc:
        raise _read_failed(exc) from exc
    finally:
        await response.aclose()


def _interpret_response(url: str, response: httpx.Response, body: bytes) -> Summary:
    """Classify a fully read response and decode it.

    Args:
        url: Endpoint the request was sent to.
        response: Closed response whose body has been read.
        body: Raw response body.

    Returns:
        Validated Summary for a 200 response.

    Raises:
        NotFoundError: On 404.
        HTTPStatusError: On any other non-200 status.
        DecodeError: If the body is not a valid summary document.
    """
    text = body.decode("utf-8", errors="replace")

    if response.status_code == httpx.codes.NOT_FOUND:
        raise errors.NotFoundError(url)
    if response.status_code != httpx.codes.OK:
        status = f"{response.status_code} {response.reason_phrase}"
        raise errors.HTTPStatusError(status, text)

    logger.debug("Raw response from kubelet", url=url, body=text)

    try:
        return Summary.model_validate_json(body)
    except pydantic.ValidationError as exc:
        msg = f"failed to parse output. Response: {text!r}. Error: {exc}"
        raise errors.DecodeError(msg, body=text) from exc


def _transport_failed(
    url: str,
    exc: httpx.TransportError,
    start_time: float,
) -> errors.TransportError:
    logger.exception(
        "Kubelet request failed",
        url=url,
        duration_seconds=round(time.time() - start_time, 3),
    )
    return errors.TransportError(f"request to {url} failed - {exc}")


class _BaseSummaryClient:
    """Configuration shared by the sync and async clients."""

    def __init__(
        self,
        port: int = DEFAULT_PORT,
        use_insecure_scheme: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if not 0 < port < 65536:  # noqa: PLR2004
            msg = f"port must be between 1 and 65535, got {port}"
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self.port = port
        self.use_insecure_scheme = use_insecure_scheme

    @classmethod
    def from_config(
        cls: type[_ClientT],
        config: "ClientConfig",
        transport: httpx.BaseTransport | httpx.AsyncBaseTransport | None = None,
    ) -> _ClientT:
        """Build a client from validated configuration.

        Args:
            config: Loaded client configuration.
            transport: Optional httpx transport owned by the caller.

        Returns:
            A new client instance.
        """
        return cls(
            transport=transport,
            port=config.port,
            use_insecure_scheme=config.use_insecure_scheme,
            timeout=config.timeout,
        )

    def _build_request(
        self,
        client: httpx.Client | httpx.AsyncClient,
        host: str,
    ) -> tuple[str, httpx.Request]:
        url = build_summary_url(host, self.port, self.use_insecure_scheme)
        try:
            request = client.build_request("GET", url)
        except httpx.InvalidURL as exc:
            msg = f"invalid kubelet address {host!r}: {exc}"
            raise ValueError(msg) from exc
        logger.debug("Making kubelet request", method="GET", url=url)
        return url, request


class SummaryClient(_BaseSummaryClient):
    """HTTP client for the kubelet summary API.

    Holds one httpx.Client for its whole lifetime and keeps no per-call
    state, so a single instance can serve concurrent callers as long as
    the transport is thread-safe (httpx's own transports are).

    A transport passed in belongs to the caller and is left open by
    :meth:`close`. Without one, httpx's default transport is used and
    closed along with the client.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        port: int = DEFAULT_PORT,
        use_insecure_scheme: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize the client.

        No network I/O happens here.

        Args:
            transport: httpx transport handling TLS, auth and connection
                reuse. Defaults to httpx's HTTPTransport.
            port: Kubelet port (default: 10250).
            use_insecure_scheme: Talk plain http instead of https.
            timeout: Request timeout in seconds (default: 30.0).

        Raises:
            ValueError: If port is out of range or timeout is not positive.
        """
        super().__init__(port, use_insecure_scheme, timeout)
        self._owns_transport = transport is None
        self._client = httpx.Client(transport=transport, timeout=timeout)

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self):
        """Close the HTTP client if it owns its transport."""
        if self._owns_transport and not self._client.is_closed:
            self._client.close()

    def get_summary(self, host: str) -> Summary:
        """Fetch summary metrics from the kubelet on ``host``.

        Sends exactly one GET request. The response is closed on every
        path, including errors.

        Args:
            host: IP address or DNS name of the node.

        Returns:
            Validated Summary owned by the caller.

        Raises:
            ValueError: If host is empty or not a valid address.
            TransportError: If the request could not be completed.
            NotFoundError: If the kubelet answers 404.
            HTTPStatusError: If the kubelet answers any other non-200 status.
            DecodeError: If the body cannot be read or is not a valid summary.
        """
        url, request = self._build_request(self._client, host)
        start_time = time.time()

        try:
            response = self._client.send(request, stream=True)
        except httpx.TransportError as exc:
            raise _transport_failed(url, exc, start_time) from exc

        body = _read_body(response)
        logger.debug(
            "Kubelet request completed",
            url=url,
            status_code=response.status_code,
            duration_seconds=round(time.time() - start_time, 3),
        )
        return _interpret_response(url, response, body)


class AsyncSummaryClient(_BaseSummaryClient):
    """Asyncio variant of :class:`SummaryClient`.

    Cancelling the task awaiting :meth:`get_summary` aborts the request;
    the response, if one was received, is still closed.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        port: int = DEFAULT_PORT,
        use_insecure_scheme: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        super().__init__(port, use_insecure_scheme, timeout)
        self._owns_transport = transport is None
        self._client = httpx.AsyncClient(transport=transport, timeout=timeout)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        """Close the HTTP client if it owns its transport."""
        if self._owns_transport and not self._client.is_closed:
            await self._client.aclose()

    async def get_summary(self, host: str) -> Summary:
        """Fetch summary metrics from the kubelet on ``host``.

        Same contract as :meth:`SummaryClient.get_summary`.
        """
        url, request = self._build_request(self._client, host)
        start_time = time.time()

        try:
            response = await self._client.send(request, stream=True)
        except httpx.TransportError as exc:
            raise _transport_failed(url, exc, start_time) from exc

        body = await _aread_body(response)
        logger.debug(
            "Kubelet request completed",
            url=url,
            status_code=response.status_code,
            duration_seconds=round(time.time() - start_time, 3),
        )
        return _interpret_response(url, response, body)
