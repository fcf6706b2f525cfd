"""Exceptions raised by the interception core.

``RequestNotMocked`` and ``NetworkDisabled`` share one message shape,
``"<METHOD> <url> <detail>"``, so assertion helpers written against a
missing fixture work unchanged against a disabled network.
"""

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mockapi.models import RequestDescriptor

_MESSAGE_PATTERN = re.compile(
    r"^(?P<method>[A-Z]+) (?P<url>\S+)(?: (?P<detail>.*))?$", re.S
)


class MockAPIError(Exception):
    """Base class for every error raised by mockapi."""


class RequestNotSatisfied(MockAPIError):
    """An intercepted request that could not be served."""

    def __init__(
        self,
        method: str,
        url: str,
        body: bytes | None = None,
        fixture_path: str | None = None,
    ):
        self.method = method
        self.url = url
        self.body = body
        self.fixture_path = fixture_path
        super().__init__(format_request_message(method, url, self.detail))

    @property
    def detail(self) -> str:
        """Trailing part of the message: probed path and/or body."""
        parts = []
        if self.fixture_path:
            parts.append(f"({self.fixture_path})")
        if self.body:
            parts.append(self.body.decode("utf-8", errors="replace"))
        return " ".join(parts)


class RequestNotMocked(RequestNotSatisfied):
    """Mock lookup found no fixture for the request."""


class NetworkDisabled(RequestNotSatisfied):
    """A request was made while the network is disabled."""


class FixtureNotFound(MockAPIError):
    """No candidate fixture file exists."""

    def __init__(self, fixture_path: str, candidates: list[str] | None = None):
        self.fixture_path = fixture_path
        self.candidates = candidates or []
        super().__init__(f"No fixture found for {fixture_path}")


class FixtureDecodeError(MockAPIError):
    """A fixture file exists but cannot be turned into a response."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not decode fixture {path}: {reason}")


class RecordWriteError(MockAPIError):
    """A captured response could not be persisted."""


class ScopeError(MockAPIError):
    """A scope handle was exited out of order or twice."""


def format_request_message(method: str, url: str, detail: str = "") -> str:
    """Render the canonical ``METHOD URL detail`` message."""
    message = f"{method} {url}"
    if detail:
        message = f"{message} {detail}"
    return message


def parse_request_error(message: str) -> tuple[str, str, str] | None:
    """Split a request error message into method, URL and detail.

    Args:
        message: Message of a ``RequestNotSatisfied`` error

    Returns:
        Tuple of (method, url, detail), or None if the message has another shape
    """
    match = _MESSAGE_PATTERN.match(message)
    if match is None:
        return None
    return match["method"], match["url"], match["detail"] or ""


def request_not_mocked(
    request: "RequestDescriptor", fixture_path: str
) -> RequestNotMocked:
    """Build the error for a mock lookup miss."""
    return RequestNotMocked(
        request.method, request.url, body=request.body, fixture_path=fixture_path
    )


def network_disabled(request: "RequestDescriptor") -> NetworkDisabled:
    """Build the error for a request made without network access."""
    return NetworkDisabled(request.method, request.url, body=request.body)
