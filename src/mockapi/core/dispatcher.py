"""Scoped interception modes and per-request routing."""

import itertools
import logging
from collections.abc import Awaitable, Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

from mockapi.core.encoder import encode
from mockapi.core.loader import FixtureLoader
from mockapi.core.recorder import ResponseRecorder
from mockapi.errors import (
    FixtureNotFound,
    ScopeError,
    network_disabled,
    request_not_mocked,
)
from mockapi.models import Mode, RequestDescriptor, ResponseDescriptor, ScopeOptions

Transport = Callable[[RequestDescriptor], ResponseDescriptor]
AsyncTransport = Callable[[RequestDescriptor], Awaitable[ResponseDescriptor]]

_frame_ids = itertools.count(1)


@dataclass(frozen=True)
class ScopeHandle:
    """One frame of the scope stack, returned by ``enter``."""

    mode: Mode
    options: ScopeOptions
    frame_id: int = field(default_factory=lambda: next(_frame_ids))


class ContextDispatcher:
    """Routes intercepted requests according to the innermost active scope.

    The stack lives in a context variable, so each thread and each asyncio
    task sees its own scopes. Outside any scope the mode is ``INACTIVE``.
    """

    def __init__(
        self,
        loader: FixtureLoader | None = None,
        recorder: ResponseRecorder | None = None,
        name: str = "mockapi",
    ):
        self.loader = loader or FixtureLoader()
        self.recorder = recorder or ResponseRecorder()
        self.logger = logging.getLogger(__name__)
        self._stack: ContextVar[tuple[ScopeHandle, ...]] = ContextVar(
            f"{name}_scope_stack", default=()
        )

    @property
    def current(self) -> ScopeHandle | None:
        """Innermost scope, or None outside any scope."""
        stack = self._stack.get()
        return stack[-1] if stack else None

    @property
    def mode(self) -> Mode:
        current = self.current
        return current.mode if current else Mode.INACTIVE

    @property
    def depth(self) -> int:
        return len(self._stack.get())

    def enter(self, mode: Mode, options: ScopeOptions | None = None) -> ScopeHandle:
        """Push a scope and make it current."""
        handle = ScopeHandle(mode=mode, options=options or ScopeOptions())
        self._stack.set((*self._stack.get(), handle))
        self.logger.debug(f"Entered {mode.value} scope (depth {self.depth})")
        return handle

    def exit(self, handle: ScopeHandle) -> None:
        """Pop scopes down to and including ``handle``.

        Raises:
            ScopeError: If ``handle`` is not on the current stack
        """
        stack = self._stack.get()
        for index in range(len(stack) - 1, -1, -1):
            if stack[index].frame_id == handle.frame_id:
                self._stack.set(stack[:index])
                self.logger.debug(
                    f"Exited {handle.mode.value} scope, now {self.mode.value}"
                )
                return

        raise ScopeError(f"Scope {handle.frame_id} ({handle.mode.value}) is not active")

    @contextmanager
    def scope(
        self, mode: Mode, options: ScopeOptions | None = None
    ) -> Generator[ScopeHandle, None, None]:
        """Run a block under ``mode``, restoring the enclosing mode afterwards."""
        handle = self.enter(mode, options)
        try:
            yield handle
        finally:
            self.exit(handle)

    def intercept(
        self, request: RequestDescriptor, transport: Transport
    ) -> ResponseDescriptor:
        """Serve ``request`` according to the current scope.

        Args:
            request: The intercepted request
            transport: Performs the real network call

        Returns:
            The fixture, live, or recorded response

        Raises:
            RequestNotMocked: Mock lookup found no fixture
            NetworkDisabled: The network is disabled
            FixtureDecodeError: A fixture exists but is malformed
            RecordWriteError: A captured response could not be written
        """
        current = self.current
        if current is None or current.mode is Mode.INACTIVE:
            return transport(request)
        if current.mode is Mode.CAPTURE:
            response = transport(request)
            self._record(current, request, response)
            return response
        return self._serve(current, request)

    async def aintercept(
        self, request: RequestDescriptor, transport: AsyncTransport
    ) -> ResponseDescriptor:
        """Async counterpart of ``intercept``."""
        current = self.current
        if current is None or current.mode is Mode.INACTIVE:
            return await transport(request)
        if current.mode is Mode.CAPTURE:
            response = await transport(request)
            self._record(current, request, response)
            return response
        return self._serve(current, request)

    def _serve(
        self, current: ScopeHandle, request: RequestDescriptor
    ) -> ResponseDescriptor:
        if current.mode is Mode.NO_NETWORK:
            raise network_disabled(request)

        fixture_path = encode(request)
        try:
            return self.loader.find(current.options.mock_roots, fixture_path)
        except FixtureNotFound as e:
            self.logger.debug(f"No fixture for {request.method} {request.url}")
            raise request_not_mocked(request, fixture_path) from e

    def _record(
        self,
        current: ScopeHandle,
        request: RequestDescriptor,
        response: ResponseDescriptor,
    ) -> None:
        options = current.options
        self.recorder.record(
            options.mock_roots,
            request,
            response,
            simplify=options.simplify,
            overwrite=options.overwrite,
            redact_headers=options.redact_headers,
        )


default_dispatcher = ContextDispatcher()
