"""
Transports: the collaborators that actually move bytes over the network.

A transport receives a fully built :class:`httpx.Request` (absolute URL with
the merged query, headers and encoded body) and returns the
:class:`httpx.Response` it obtained. Anything that prevents the exchange from
completing is raised as :class:`TransportFailure`.
"""

from __future__ import annotations

import contextlib
import inspect
import logging
import typing
from types import TracebackType

import httpx

from ._config import TransportConfig
from ._exceptions import TransportFailure, TransportTimeout

__all__ = [
    "AsyncBaseTransport",
    "AsyncHTTPXTransport",
    "AsyncMockTransport",
    "BaseTransport",
    "HTTPXTransport",
    "MockTransport",
    "map_transport_errors",
]

logger = logging.getLogger("httpseam.transports")


@contextlib.contextmanager
def map_transport_errors(request: httpx.Request | None = None) -> typing.Iterator[None]:
    """Re-raise network level errors and unreadable body streams as :class:`TransportFailure`."""
    try:
        yield
    except (httpx.TimeoutException, TimeoutError) as exc:
        raise TransportTimeout(f"{type(exc).__name__}: {exc}", request=request) from exc
    except (httpx.TransportError, httpx.StreamError, OSError) as exc:
        raise TransportFailure(f"{type(exc).__name__}: {exc}", request=request) from exc


class BaseTransport:
    def execute(self, request: httpx.Request) -> httpx.Response:
        raise NotImplementedError("The 'execute' method must be implemented.")  # pragma: no cover

    def close(self) -> None:
        pass

    def __enter__(self: _T) -> _T:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncBaseTransport:
    async def execute(self, request: httpx.Request) -> httpx.Response:
        raise NotImplementedError("The 'execute' method must be implemented.")  # pragma: no cover

    async def aclose(self) -> None:
        pass

    async def __aenter__(self: _A) -> _A:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()


_T = typing.TypeVar("_T", bound=BaseTransport)
_A = typing.TypeVar("_A", bound=AsyncBaseTransport)


class HTTPXTransport(BaseTransport):
    """
    Send requests through an :class:`httpx.Client`.

    Pass ``client`` to reuse an existing httpx client; its own settings then
    take precedence and the transport will not close it.
    """

    def __init__(self, config: TransportConfig | None = None, *, client: httpx.Client | None = None) -> None:
        self.config = config if config is not None else TransportConfig()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(**self.config.httpx_options())
        if self._owns_client:
            logger.debug(
                "Created httpx client (timeout=%s, verify=%s, follow_redirects=%s)",
                self.config.timeout,
                self.config.verify,
                self.config.follow_redirects,
            )

    def execute(self, request: httpx.Request) -> httpx.Response:
        with map_transport_errors(request):
            return self._client.send(request, stream=self.config.stream)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()


class AsyncHTTPXTransport(AsyncBaseTransport):
    def __init__(
        self, config: TransportConfig | None = None, *, client: httpx.AsyncClient | None = None
    ) -> None:
        self.config = config if config is not None else TransportConfig()
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(**self.config.httpx_options())
        if self._owns_client:
            logger.debug(
                "Created httpx client (timeout=%s, verify=%s, follow_redirects=%s)",
                self.config.timeout,
                self.config.verify,
                self.config.follow_redirects,
            )

    async def execute(self, request: httpx.Request) -> httpx.Response:
        with map_transport_errors(request):
            return await self._client.send(request, stream=self.config.stream)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _bind(response: typing.Any, request: httpx.Request) -> httpx.Response:
    if not isinstance(response, httpx.Response):
        raise TypeError(f"Transport handler must return an httpx.Response, not {type(response).__name__}")
    response.request = request
    return response


class MockTransport(BaseTransport):
    """Answer every request by calling ``handler(request)``; for tests and offline use."""

    def __init__(self, handler: typing.Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler

    def execute(self, request: httpx.Request) -> httpx.Response:
        with map_transport_errors(request):
            response = self.handler(request)
        return _bind(response, request)


class AsyncMockTransport(AsyncBaseTransport):
    def __init__(self, handler: typing.Callable[[httpx.Request], typing.Any]) -> None:
        self.handler = handler

    async def execute(self, request: httpx.Request) -> httpx.Response:
        with map_transport_errors(request):
            response = self.handler(request)
            if inspect.isawaitable(response):
                response = await response
        return _bind(response, request)
