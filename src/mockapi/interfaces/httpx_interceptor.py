"""HTTP interceptor that routes httpx transports through the dispatcher.

Patching happens at the transport layer, below the client, so auth flows,
redirects and event hooks behave the same whether a response comes from a
fixture or from the network.
"""

import logging
import threading
from typing import Any

import httpx

from mockapi.core.dispatcher import ContextDispatcher, default_dispatcher
from mockapi.models import Mode, RequestDescriptor, ResponseDescriptor


class HTTPInterceptor:
    """Patches ``httpx.HTTPTransport`` and ``httpx.AsyncHTTPTransport``.

    ``install``/``uninstall`` are reference counted, so nested scopes share
    one patch and the originals come back when the last scope closes.
    """

    def __init__(self, dispatcher: ContextDispatcher | None = None):
        self.dispatcher = dispatcher or default_dispatcher
        self.original_request: Any = None
        self.original_async_request: Any = None
        self.logger = logging.getLogger(__name__)
        self._installs = 0
        self._lock = threading.Lock()

    @property
    def installed(self) -> bool:
        return self._installs > 0

    def install(self) -> None:
        """Start intercepting HTTP requests."""
        with self._lock:
            if self._installs == 0:
                self._patch()
            self._installs += 1

    def uninstall(self) -> None:
        """Stop intercepting once every ``install`` has been matched."""
        with self._lock:
            if self._installs == 0:
                return
            self._installs -= 1
            if self._installs == 0:
                self._unpatch()

    def __enter__(self) -> "HTTPInterceptor":
        self.install()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.uninstall()

    def _patch(self) -> None:
        self.original_request = httpx.HTTPTransport.handle_request
        self.original_async_request = httpx.AsyncHTTPTransport.handle_async_request
        original_request = self.original_request
        original_async_request = self.original_async_request
        dispatcher = self.dispatcher

        def intercepted_request(
            transport_instance: httpx.HTTPTransport, request: httpx.Request
        ) -> httpx.Response:
            """Intercepted sync transport method."""
            if dispatcher.mode is Mode.INACTIVE:
                return original_request(transport_instance, request)  # type: ignore[no-any-return]

            request.read()

            def send(_: RequestDescriptor) -> ResponseDescriptor:
                response = original_request(transport_instance, request)
                try:
                    response.read()
                finally:
                    response.close()
                return ResponseDescriptor.from_httpx(response)

            descriptor = RequestDescriptor.from_httpx(request)
            return dispatcher.intercept(descriptor, send).to_httpx(request)

        async def intercepted_async_request(
            transport_instance: httpx.AsyncHTTPTransport, request: httpx.Request
        ) -> httpx.Response:
            """Intercepted async transport method."""
            if dispatcher.mode is Mode.INACTIVE:
                return await original_async_request(transport_instance, request)  # type: ignore[no-any-return]

            await request.aread()

            async def send(_: RequestDescriptor) -> ResponseDescriptor:
                response = await original_async_request(transport_instance, request)
                try:
                    await response.aread()
                finally:
                    await response.aclose()
                return ResponseDescriptor.from_httpx(response)

            descriptor = RequestDescriptor.from_httpx(request)
            response = await dispatcher.aintercept(descriptor, send)
            return response.to_httpx(request)

        httpx.HTTPTransport.handle_request = intercepted_request  # type: ignore[method-assign]
        httpx.AsyncHTTPTransport.handle_async_request = intercepted_async_request  # type: ignore[method-assign]
        self.logger.debug("Patched httpx transports")

    def _unpatch(self) -> None:
        if self.original_request is not None:
            httpx.HTTPTransport.handle_request = self.original_request  # type: ignore[method-assign]
        if self.original_async_request is not None:
            httpx.AsyncHTTPTransport.handle_async_request = self.original_async_request  # type: ignore[method-assign]
        self.original_request = None
        self.original_async_request = None
        self.logger.debug("Restored httpx transports")


default_interceptor = HTTPInterceptor()
