"""pytest integration for fixture-backed HTTP tests.

Enable it from a conftest:

    pytest_plugins = ["mockapi.pytest_plugin"]

Usage:
    # Default behavior - serve marked tests from fixtures, no network calls
    pytest

    # Record fresh fixtures from live API calls
    pytest --capture-fixtures

    # Search (and record into) another fixture tree
    pytest --mock-root tests/other_mocks
"""

from collections.abc import Generator
from typing import Any

import pytest

from mockapi.config import set_mock_paths
from mockapi.context import (
    InterceptionScope,
    capture_requests,
    with_mock_api,
    without_internet,
)
from mockapi.core.dispatcher import ScopeHandle

_previous_mock_paths: list[Any] | None = None


def pytest_addoption(parser: Any) -> None:
    """Add command line options for fixture-backed testing."""
    group = parser.getgroup("mockapi")
    group.addoption(
        "--capture-fixtures",
        action="store_true",
        default=False,
        help="Record live API responses as fixtures instead of replaying them",
    )
    group.addoption(
        "--mock-root",
        action="append",
        default=[],
        help="Mock root to search for fixtures (repeatable, first wins)",
    )


def pytest_configure(config: Any) -> None:
    """Register markers and apply --mock-root."""
    global _previous_mock_paths
    config.addinivalue_line(
        "markers", "mock_api(*roots): serve HTTP requests from fixtures"
    )
    config.addinivalue_line(
        "markers", "no_network: fail every HTTP request with NetworkDisabled"
    )

    roots = config.getoption("--mock-root")
    if roots:
        _previous_mock_paths = set_mock_paths(*roots)


def pytest_unconfigure(config: Any) -> None:
    """Restore the mock roots replaced by --mock-root."""
    global _previous_mock_paths
    if _previous_mock_paths is not None:
        set_mock_paths(*_previous_mock_paths)
        _previous_mock_paths = None


def _fixture_scope(config: Any, *roots: Any) -> InterceptionScope:
    """Mock lookup, or capture when --capture-fixtures is given."""
    if config.getoption("--capture-fixtures"):
        return capture_requests(roots[0] if roots else None)
    return with_mock_api(*roots)


@pytest.fixture(autouse=True)
def _mockapi_marker_scope(request: Any) -> Generator[ScopeHandle | None, None, None]:
    """Open a scope for tests marked ``mock_api`` or ``no_network``."""
    scope: InterceptionScope | None = None

    mock_marker = request.node.get_closest_marker("mock_api")
    if mock_marker is not None:
        scope = _fixture_scope(request.config, *mock_marker.args)
    elif request.node.get_closest_marker("no_network") is not None:
        scope = without_internet()

    if scope is None:
        yield None
        return

    with scope as handle:
        yield handle


@pytest.fixture
def mock_api(request: Any) -> Generator[ScopeHandle, None, None]:
    """Serve HTTP requests from the configured mock roots."""
    with _fixture_scope(request.config) as handle:
        yield handle


@pytest.fixture
def no_network() -> Generator[ScopeHandle, None, None]:
    """Fail every HTTP request with NetworkDisabled."""
    with without_internet() as handle:
        yield handle


@pytest.fixture
def capture() -> Generator[ScopeHandle, None, None]:
    """Make real requests and record them under the configured mock roots."""
    with capture_requests() as handle:
        yield handle
