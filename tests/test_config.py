import importlib
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from mockapi import config


@pytest.fixture
def reload_config(
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[pytest.MonkeyPatch, None, None]:
    """Reload the config module after the test changes the environment."""
    previous = config.mock_paths()
    yield monkeypatch
    monkeypatch.undo()
    importlib.reload(config)
    config.set_mock_paths(*previous)


class TestMockPaths:
    """Test suite for the mock root settings."""

    @pytest.mark.unit
    def test_set_and_restore(self, tmp_path: Path) -> None:
        """Test that set_mock_paths returns the previous roots for restoring."""
        original = config.mock_paths()

        previous = config.set_mock_paths(tmp_path / "a", str(tmp_path / "b"))
        try:
            assert previous == original
            assert config.mock_paths() == [tmp_path / "a", tmp_path / "b"]
        finally:
            config.set_mock_paths(*previous)

        assert config.mock_paths() == original

    @pytest.mark.unit
    def test_reset_to_defaults(self, tmp_path: Path) -> None:
        """Test that calling without arguments restores the defaults."""
        previous = config.set_mock_paths(tmp_path)
        try:
            config.set_mock_paths()
            assert config.mock_paths() == [Path(p) for p in config.DEFAULT_MOCK_PATHS]
        finally:
            config.set_mock_paths(*previous)

    @pytest.mark.unit
    def test_returns_copy(self) -> None:
        """Test that mutating the returned list does not change the setting."""
        paths = config.mock_paths()
        paths.append(Path("elsewhere"))

        assert Path("elsewhere") not in config.mock_paths()


class TestEnvironment:
    """Test suite for environment-driven defaults."""

    @pytest.mark.unit
    def test_default_root(self, reload_config: pytest.MonkeyPatch) -> None:
        """Test the default mock root."""
        reload_config.delenv("MOCKAPI_PATHS", raising=False)
        importlib.reload(config)

        assert config.mock_paths() == [Path("tests/mocks")]

    @pytest.mark.unit
    def test_paths_from_environment(self, reload_config: pytest.MonkeyPatch) -> None:
        """Test that MOCKAPI_PATHS is split on the path separator."""
        reload_config.setenv("MOCKAPI_PATHS", os.pathsep.join(["one", "", "two"]))
        importlib.reload(config)

        assert config.mock_paths() == [Path("one"), Path("two")]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,expected",
        [("false", False), ("0", False), ("No", False), ("true", True), ("1", True)],
    )
    def test_simplify_from_environment(
        self, reload_config: pytest.MonkeyPatch, value: str, expected: bool
    ) -> None:
        """Test MOCKAPI_SIMPLIFY parsing."""
        reload_config.setenv("MOCKAPI_SIMPLIFY", value)
        importlib.reload(config)

        assert config.DEFAULT_SIMPLIFY is expected
