"""
Configuration for mock roots and recording defaults.

Values are read from the environment once, at import time, the same way
the rest of the package reads its settings. ``set_mock_paths`` overrides
the mock roots for the running process.
"""

import os
from pathlib import Path

DEFAULT_MOCK_PATHS = [
    path for path in os.getenv("MOCKAPI_PATHS", "tests/mocks").split(os.pathsep) if path
]
DEFAULT_SIMPLIFY = os.getenv("MOCKAPI_SIMPLIFY", "true").lower() not in (
    "0",
    "false",
    "no",
)

_mock_paths: list[Path] = [Path(path) for path in DEFAULT_MOCK_PATHS]


def mock_paths() -> list[Path]:
    """Ordered mock roots searched for fixtures and used for recording."""
    return list(_mock_paths)


def set_mock_paths(*paths: str | Path) -> list[Path]:
    """Replace the mock roots; with no arguments, restore the defaults.

    Args:
        paths: New mock roots, highest priority first

    Returns:
        The previous mock roots, so callers can restore them
    """
    global _mock_paths
    previous = _mock_paths
    if paths:
        _mock_paths = [Path(path) for path in paths]
    else:
        _mock_paths = [Path(path) for path in DEFAULT_MOCK_PATHS]
    return list(previous)
