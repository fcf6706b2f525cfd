import json
from pathlib import Path
from typing import Any
from unittest.mock import Mock

import httpx
import pytest

from mockapi.core.dispatcher import ScopeHandle, default_dispatcher
from mockapi.errors import NetworkDisabled, RequestNotMocked
from mockapi.models import Mode
from mockapi.pytest_plugin import _fixture_scope
from tests.fixtures.http_helpers import MOCKS_DIR
from tests.fixtures.sample_requests import SHOW_USER_PATH, SHOW_USER_URL


def _config(capture: bool) -> Any:
    config = Mock()
    config.getoption.side_effect = lambda name: {
        "--capture-fixtures": capture,
        "--mock-root": [],
    }[name]
    return config


class TestMarkers:
    """Test suite for the mock_api and no_network markers."""

    @pytest.mark.integration
    @pytest.mark.mock_api(MOCKS_DIR)
    def test_mock_api_marker(self) -> None:
        """Test that a marked test is served from fixtures."""
        assert default_dispatcher.mode is Mode.MOCK_LOOKUP
        assert httpx.get(SHOW_USER_URL).json() == {"name": "Bob"}

    @pytest.mark.integration
    @pytest.mark.mock_api(MOCKS_DIR)
    async def test_mock_api_marker_async(self) -> None:
        """Test that the marker scope is visible inside async tests."""
        async with httpx.AsyncClient() as client:
            response = await client.get("https://api.example.com/users")

        assert response.json()[0] == {"name": "Alice"}

    @pytest.mark.integration
    @pytest.mark.no_network
    def test_no_network_marker(self) -> None:
        """Test that a marked test cannot reach the network."""
        with pytest.raises(NetworkDisabled):
            httpx.get("https://example.com/")

    @pytest.mark.unit
    def test_unmarked_test_is_inactive(self) -> None:
        """Test that unmarked tests run without a scope."""
        assert default_dispatcher.mode is Mode.INACTIVE


class TestFixtures:
    """Test suite for the plugin fixtures."""

    @pytest.mark.integration
    def test_mock_api_fixture(
        self,
        configured_mock_paths: Path,
        http_mock_helpers: Any,
        mock_api: ScopeHandle,
    ) -> None:
        """Test the mock_api fixture against the configured root."""
        http_mock_helpers.write_fixture(configured_mock_paths, "example.com/a.json", "[]")

        assert mock_api.options.mock_roots == (configured_mock_paths,)
        assert httpx.get("https://example.com/a").json() == []
        with pytest.raises(RequestNotMocked):
            httpx.get("https://example.com/b")

    @pytest.mark.integration
    def test_no_network_fixture(self, no_network: ScopeHandle) -> None:
        """Test the no_network fixture."""
        assert no_network.mode is Mode.NO_NETWORK
        with pytest.raises(NetworkDisabled):
            httpx.get("https://example.com/")

    @pytest.mark.integration
    def test_capture_fixture(
        self, configured_mock_paths: Path, respx_mock: Any, capture: ScopeHandle
    ) -> None:
        """Test the capture fixture records into the configured root."""
        respx_mock.get(SHOW_USER_URL).respond(json={"name": "Bob"})

        httpx.get(SHOW_USER_URL)

        recorded = configured_mock_paths / SHOW_USER_PATH
        assert json.loads(recorded.read_text()) == {"name": "Bob"}


class TestFixtureScope:
    """Test suite for choosing between replay and capture."""

    @pytest.mark.unit
    def test_replay_by_default(self) -> None:
        """Test that fixtures are replayed without --capture-fixtures."""
        scope = _fixture_scope(_config(capture=False), "tests/other")

        assert scope.mode is Mode.MOCK_LOOKUP
        assert scope.roots == (Path("tests/other"),)

    @pytest.mark.unit
    def test_capture_option(self) -> None:
        """Test that --capture-fixtures switches to recording."""
        scope = _fixture_scope(_config(capture=True), "tests/other")

        assert scope.mode is Mode.CAPTURE
        assert scope.roots == (Path("tests/other"),)

    @pytest.mark.unit
    def test_capture_without_roots(self) -> None:
        """Test that capture falls back to the configured roots."""
        scope = _fixture_scope(_config(capture=True))

        assert scope.mode is Mode.CAPTURE
        assert scope.roots == ()
