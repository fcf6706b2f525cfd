"""Interception core: path encoding, scope dispatch, fixture loading and recording."""

from .dispatcher import ContextDispatcher, ScopeHandle, default_dispatcher
from .encoder import build_mock_path, encode
from .loader import FixtureLoader
from .recorder import ResponseRecorder

__all__ = [
    "ContextDispatcher",
    "ScopeHandle",
    "default_dispatcher",
    "build_mock_path",
    "encode",
    "FixtureLoader",
    "ResponseRecorder",
]
