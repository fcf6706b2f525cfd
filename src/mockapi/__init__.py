"""Fixture-backed HTTP testing for httpx clients.

Requests made through httpx are intercepted at the transport layer and,
depending on the innermost active scope, served from fixture files,
rejected as if the network were down, or sent for real and recorded.

Usage:
    with with_mock_api("tests/mocks"):
        response = httpx.get("https://api.example.com/users/show.json")

    with without_internet():
        httpx.get("https://api.example.com/")  # raises NetworkDisabled

    with capture_requests("tests/mocks"):
        httpx.get("https://api.example.com/users/show.json")  # recorded

Features:
    - Fixture tree that mirrors each API's resource hierarchy
    - Raw-body fixtures for plain 200 responses, full records for the rest
    - Nested scopes, isolated per thread and per asyncio task
    - One error shape for missing fixtures and disabled network
"""

from .config import mock_paths, set_mock_paths
from .context import (
    InterceptionScope,
    capture_requests,
    use_network,
    with_mock_api,
    without_internet,
)
from .core import (
    ContextDispatcher,
    FixtureLoader,
    ResponseRecorder,
    ScopeHandle,
    build_mock_path,
    default_dispatcher,
    encode,
)
from .errors import (
    FixtureDecodeError,
    FixtureNotFound,
    MockAPIError,
    NetworkDisabled,
    RecordWriteError,
    RequestNotMocked,
    RequestNotSatisfied,
    ScopeError,
    parse_request_error,
)
from .interfaces.httpx_interceptor import HTTPInterceptor
from .models import Mode, RequestDescriptor, ResponseDescriptor, ScopeOptions

__version__ = "1.0.0"
__all__ = [
    # Scopes
    "with_mock_api",
    "without_internet",
    "capture_requests",
    "use_network",
    "InterceptionScope",
    # Configuration
    "mock_paths",
    "set_mock_paths",
    # Core
    "ContextDispatcher",
    "FixtureLoader",
    "ResponseRecorder",
    "ScopeHandle",
    "HTTPInterceptor",
    "default_dispatcher",
    "build_mock_path",
    "encode",
    # Models
    "Mode",
    "RequestDescriptor",
    "ResponseDescriptor",
    "ScopeOptions",
    # Errors
    "MockAPIError",
    "RequestNotSatisfied",
    "RequestNotMocked",
    "NetworkDisabled",
    "FixtureNotFound",
    "FixtureDecodeError",
    "RecordWriteError",
    "ScopeError",
    "parse_request_error",
]
