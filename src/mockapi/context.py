"""Context managers and decorators that open interception scopes.

Usage:
    with with_mock_api("tests/mocks"):
        httpx.get("https://api.example.com/users/show.json")

    with without_internet():
        with pytest.raises(NetworkDisabled):
            httpx.post("https://api.example.com/items/", json={"a": 1})

    @capture_requests("tests/mocks")
    async def refresh_fixtures() -> None:
        ...
"""

import inspect
from collections.abc import Sequence
from contextvars import ContextVar
from functools import wraps
from pathlib import Path
from typing import Any

from mockapi import config
from mockapi.core.dispatcher import ContextDispatcher, ScopeHandle, default_dispatcher
from mockapi.interfaces.httpx_interceptor import HTTPInterceptor, default_interceptor
from mockapi.models import Mode, ScopeOptions
from mockapi.utils.constants import DEFAULT_REDACTED_HEADERS


class InterceptionScope:
    """A reusable scope: context manager (sync or async) and decorator.

    Mock roots are resolved when the scope is entered, so changes made with
    ``config.set_mock_paths`` apply to scopes created earlier.
    """

    def __init__(
        self,
        mode: Mode,
        roots: Sequence[str | Path] = (),
        simplify: bool | None = None,
        overwrite: bool = True,
        redact_headers: Sequence[str] = DEFAULT_REDACTED_HEADERS,
        dispatcher: ContextDispatcher | None = None,
        interceptor: HTTPInterceptor | None = None,
    ):
        self.mode = mode
        self.roots = tuple(Path(root) for root in roots)
        self.simplify = config.DEFAULT_SIMPLIFY if simplify is None else simplify
        self.overwrite = overwrite
        self.redact_headers = tuple(name.lower() for name in redact_headers)
        self.dispatcher = dispatcher or default_dispatcher
        self.interceptor = interceptor or default_interceptor
        # Handles opened by ``with``, per thread and per task
        self._handles: ContextVar[tuple[ScopeHandle, ...]] = ContextVar(
            f"mockapi_scope_{id(self)}", default=()
        )

    def options(self) -> ScopeOptions:
        """Options for a frame entered now."""
        return ScopeOptions(
            mock_roots=self.roots or tuple(config.mock_paths()),
            simplify=self.simplify,
            overwrite=self.overwrite,
            redact_headers=self.redact_headers,
        )

    def enter(self) -> ScopeHandle:
        """Install the interceptor and push this scope's frame."""
        self.interceptor.install()
        try:
            return self.dispatcher.enter(self.mode, self.options())
        except BaseException:
            self.interceptor.uninstall()
            raise

    def exit(self, handle: ScopeHandle) -> None:
        """Pop the frame and release the interceptor, even if popping fails."""
        try:
            self.dispatcher.exit(handle)
        finally:
            self.interceptor.uninstall()

    def __enter__(self) -> ScopeHandle:
        handle = self.enter()
        self._handles.set((*self._handles.get(), handle))
        return handle

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        *opened, handle = self._handles.get()
        self._handles.set(tuple(opened))
        self.exit(handle)

    async def __aenter__(self) -> ScopeHandle:
        return self.__enter__()

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.__exit__(exc_type, exc_val, exc_tb)

    def __call__(self, func: Any) -> Any:
        """Decorate a sync or async function so it runs inside this scope."""
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                handle = self.enter()
                try:
                    return await func(*args, **kwargs)
                finally:
                    self.exit(handle)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            handle = self.enter()
            try:
                return func(*args, **kwargs)
            finally:
                self.exit(handle)

        return sync_wrapper


def with_mock_api(*roots: str | Path) -> InterceptionScope:
    """Serve requests from fixtures under ``roots`` (default: configured roots)."""
    return InterceptionScope(Mode.MOCK_LOOKUP, roots)


def without_internet() -> InterceptionScope:
    """Fail every request with ``NetworkDisabled``; no filesystem access."""
    return InterceptionScope(Mode.NO_NETWORK)


def capture_requests(
    root: str | Path | None = None,
    simplify: bool | None = None,
    overwrite: bool = True,
    redact_headers: Sequence[str] = DEFAULT_REDACTED_HEADERS,
) -> InterceptionScope:
    """Make real requests and record each response as a fixture.

    Args:
        root: Directory to record into (default: configured roots)
        simplify: Store plain 200 bodies as raw files (default from config)
        overwrite: Replace fixtures that already exist
        redact_headers: Response headers left out of recorded fixtures
    """
    roots = (root,) if root is not None else ()
    return InterceptionScope(
        Mode.CAPTURE,
        roots,
        simplify=simplify,
        overwrite=overwrite,
        redact_headers=redact_headers,
    )


def use_network() -> InterceptionScope:
    """Let requests reach the real transport, e.g. inside a mocked block."""
    return InterceptionScope(Mode.INACTIVE)
