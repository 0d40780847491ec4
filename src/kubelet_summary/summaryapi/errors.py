"""Errors raised by the kubelet summary clients.

Only :class:`NotFoundError` is meant for programmatic branching, through
:func:`is_not_found`. The other errors carry enough context to be logged
and propagated.
"""


class SummaryError(Exception):
    """Base class for all summary client errors."""


class TransportError(SummaryError):
    """Raised when the request could not be sent or no response arrived."""


class NotFoundError(SummaryError):
    """Raised when the kubelet answers 404 for the summary endpoint.

    Usually means the node does not expose the endpoint, which callers
    tend to skip rather than report.
    """

    def __init__(self, endpoint: str):
        self.endpoint = endpoint
        super().__init__(f'"{endpoint}" not found')


class HTTPStatusError(SummaryError):
    """Raised for any non-200 response other than 404."""

    def __init__(self, status: str, body: str):
        self.status = status
        self.body = body
        super().__init__(f"request failed - {status!r}, response: {body!r}")


class DecodeError(SummaryError):
    """Raised when the response body cannot be read or parsed."""

    def __init__(self, message: str, body: str = ""):
        self.body = body
        super().__init__(message)


def is_not_found(err: BaseException | None) -> bool:
    """Report whether an error is, or was caused by, a :class:`NotFoundError`.

    Follows the explicit ``__cause__`` chain so that callers wrapping the
    error with ``raise ... from err`` can still classify it. A chain that
    loops back on itself is walked once.

    Args:
        err: Any exception, or None.

    Returns:
        True only for a NotFoundError or an error chained to one.
    """
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, NotFoundError):
            return True
        seen.add(id(err))
        err = err.__cause__
    return False
