from __future__ import annotations

import inspect
import logging
import typing
from types import TracebackType

import httpx

from ._config import TransportConfig
from ._content import Content
from ._exceptions import MalformedURL, TransportFailure
from ._models import Request, Response
from ._transports import (
    AsyncBaseTransport,
    AsyncHTTPXTransport,
    BaseTransport,
    HTTPXTransport,
    map_transport_errors,
)
from ._types import Method
from ._urlparse import is_valid_url, merge_query

__all__ = ["AsyncClient", "Client"]

logger = logging.getLogger("httpseam.client")

QueryArgs = typing.Optional[typing.Mapping[str, typing.Any]]
HeaderMap = typing.Optional[typing.Mapping[str, str]]
BodyContent = typing.Union[Content, bytes, str, None]


class _BaseClient:
    _transport: typing.Any

    def is_valid_url(self, url: typing.Any) -> bool:
        """Syntactic check only: absolute http(s) URL with a host. No DNS lookups."""
        return is_valid_url(url)

    def build_request(
        self,
        method: Method | str,
        url: str,
        args: QueryArgs = None,
        headers: HeaderMap = None,
        content: BodyContent = None,
    ) -> Request:
        request = Request(method, url)
        for key, value in (args or {}).items():
            request.set_query_arg(key, value)
        for key, value in (headers or {}).items():
            request.set_header(key, value)
        if content is not None:
            request.add_content(content)
        return request

    def get_response(self, raw_result: httpx.Response) -> Response:
        return Response(raw_result)

    def get_handler(self) -> typing.Any:
        return self._transport

    def _check_handler(self, transport: typing.Any) -> None:
        if not callable(getattr(transport, "execute", None)):
            raise TypeError(f"Transport must provide an 'execute' method, got {type(transport).__name__}")

    def _build_transport_request(self, request: Request) -> httpx.Request:
        url = request.get_url()
        if url is None:
            raise MalformedURL("Request has no URL")

        headers = request.get_headers()
        body: bytes | None = None
        content = request.get_content()
        if content is not None:
            content_headers, body = content.encode()
            present = {key.lower() for key in headers}
            for key, value in content_headers.items():
                if key.lower() not in present:
                    headers[key] = value

        return httpx.Request(
            request.get_method().value,
            merge_query(url, request.get_query_args()),
            headers=headers,
            content=body,
        )

    def _wrap(self, raw_request: httpx.Request, raw_result: typing.Any) -> Response:
        if raw_result is None:
            raise TransportFailure("Transport returned no result", request=raw_request)
        response = self.get_response(raw_result)
        logger.debug(
            "%s %s -> %d", raw_request.method, raw_request.url, response.get_status_code()
        )
        return response


class Client(_BaseClient):
    """
    Blocking HTTP client.

    All network work is delegated to the transport; the client only validates,
    assembles requests and wraps results. Unless a transport is injected an
    :class:`HTTPXTransport` built from ``config`` is used.

    Example::

        with httpseam.Client() as client:
            response = client.perform_get_request(
                "https://api.example.com/items", args={"page": "2"}
            )
            if response.get_status_class() is httpseam.StatusClass.SUCCESSFUL:
                print(response.read_as_text())
    """

    def __init__(
        self,
        transport: BaseTransport | None = None,
        *,
        config: TransportConfig | None = None,
    ) -> None:
        if transport is None:
            transport = HTTPXTransport(config)
        self.set_handler(transport)

    def set_handler(self, transport: BaseTransport) -> None:
        self._check_handler(transport)
        self._transport = transport

    transport = property(_BaseClient.get_handler, set_handler)

    def perform_request(self, request: Request) -> Response:
        raw_request = self._build_transport_request(request)
        logger.debug("Sending %s %s", raw_request.method, raw_request.url)
        try:
            with map_transport_errors(raw_request):
                raw_result = self._transport.execute(raw_request)
        except TransportFailure as exc:
            logger.warning("%s %s failed: %s", raw_request.method, raw_request.url, exc)
            raise
        return self._wrap(raw_request, raw_result)

    def perform_get_request(self, url: str, args: QueryArgs = None, headers: HeaderMap = None) -> Response:
        return self.perform_request(self.build_request(Method.GET, url, args, headers))

    def perform_head_request(self, url: str, args: QueryArgs = None, headers: HeaderMap = None) -> Response:
        return self.perform_request(self.build_request(Method.HEAD, url, args, headers))

    def perform_delete_request(self, url: str, args: QueryArgs = None, headers: HeaderMap = None) -> Response:
        return self.perform_request(self.build_request(Method.DELETE, url, args, headers))

    def perform_post_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return self.perform_request(self.build_request(Method.POST, url, args, headers, content))

    def perform_put_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return self.perform_request(self.build_request(Method.PUT, url, args, headers, content))

    def perform_patch_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return self.perform_request(self.build_request(Method.PATCH, url, args, headers, content))

    def perform_options_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return self.perform_request(self.build_request(Method.OPTIONS, url, args, headers, content))

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> Client:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class AsyncClient(_BaseClient):
    """Async counterpart of :class:`Client`; suspends only while the transport works."""

    def __init__(
        self,
        transport: AsyncBaseTransport | None = None,
        *,
        config: TransportConfig | None = None,
    ) -> None:
        if transport is None:
            transport = AsyncHTTPXTransport(config)
        self.set_handler(transport)

    def set_handler(self, transport: AsyncBaseTransport) -> None:
        self._check_handler(transport)
        if not inspect.iscoroutinefunction(transport.execute):
            raise TypeError(
                f"AsyncClient requires a transport with an async 'execute' method, got {type(transport).__name__}"
            )
        self._transport = transport

    transport = property(_BaseClient.get_handler, set_handler)

    async def perform_request(self, request: Request) -> Response:
        raw_request = self._build_transport_request(request)
        logger.debug("Sending %s %s", raw_request.method, raw_request.url)
        try:
            with map_transport_errors(raw_request):
                raw_result = await self._transport.execute(raw_request)
        except TransportFailure as exc:
            logger.warning("%s %s failed: %s", raw_request.method, raw_request.url, exc)
            raise
        return self._wrap(raw_request, raw_result)

    async def perform_get_request(self, url: str, args: QueryArgs = None, headers: HeaderMap = None) -> Response:
        return await self.perform_request(self.build_request(Method.GET, url, args, headers))

    async def perform_head_request(self, url: str, args: QueryArgs = None, headers: HeaderMap = None) -> Response:
        return await self.perform_request(self.build_request(Method.HEAD, url, args, headers))

    async def perform_delete_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None
    ) -> Response:
        return await self.perform_request(self.build_request(Method.DELETE, url, args, headers))

    async def perform_post_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return await self.perform_request(self.build_request(Method.POST, url, args, headers, content))

    async def perform_put_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return await self.perform_request(self.build_request(Method.PUT, url, args, headers, content))

    async def perform_patch_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return await self.perform_request(self.build_request(Method.PATCH, url, args, headers, content))

    async def perform_options_request(
        self, url: str, args: QueryArgs = None, headers: HeaderMap = None, content: BodyContent = None
    ) -> Response:
        return await self.perform_request(self.build_request(Method.OPTIONS, url, args, headers, content))

    async def aclose(self) -> None:
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> AsyncClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
