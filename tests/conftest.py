"""Global pytest configuration and fixtures."""

from collections.abc import Generator
from typing import Any

import pytest
import respx

from tests.fixtures.http_helpers import (
    configured_mock_paths,
    http_mock_helpers,
    mock_root,
    mocks_root,
)
from tests.fixtures.sample_requests import (
    item_post_request,
    show_user_request,
    show_user_url,
)

pytest_plugins = ["mockapi.pytest_plugin"]


@pytest.fixture
def respx_mock() -> Generator[Any, None, None]:
    """Provide respx mock standing in for the live network."""
    with respx.mock(assert_all_called=False) as mock:
        yield mock
