from __future__ import annotations

import io
import logging
import re
import typing
from types import TracebackType

from ._content import (
    Content,
    FormUrlEncodedContent,
    MultipartFormDataContent,
    PartValue,
    RawContent,
)
from ._exceptions import InvalidHeader, MissingTransportResult, UnsupportedBodyCombination
from ._transports import map_transport_errors
from ._types import HeadersValidation, Method, StatusClass
from ._urlparse import validate_url

if typing.TYPE_CHECKING:
    import httpx

__all__ = ["Request", "Response"]

logger = logging.getLogger("httpseam.models")

HEADER_NAME_REGEX = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
HEADER_VALUE_FORBIDDEN = ("\r", "\n", "\0")

_CONTENT_TYPES = (RawContent, FormUrlEncodedContent, MultipartFormDataContent)


class Request:
    """
    A single outbound HTTP call under construction.

    The request holds at most one body. Adding content of a different kind
    discards the current body, unless the request was created with
    ``strict_body=True``, in which case :class:`UnsupportedBodyCombination`
    is raised instead.

    Instances are not safe for concurrent mutation.
    """

    def __init__(
        self,
        method: Method | str = Method.GET,
        url: str | None = None,
        *,
        headers: typing.Mapping[str, str] | None = None,
        query_args: typing.Mapping[str, typing.Any] | None = None,
        content: Content | bytes | str | None = None,
        headers_validation: HeadersValidation = HeadersValidation.YES,
        strict_body: bool = False,
    ) -> None:
        self._method = Method.coerce(method)
        self._url: str | None = None
        self._headers: dict[str, str] = {}
        self._query_args: dict[str, str] = {}
        self._content: Content | None = None
        self.headers_validation = headers_validation
        self.strict_body = strict_body

        if url is not None:
            self.set_url(url)
        for key, value in (headers or {}).items():
            self.set_header(key, value)
        for key, value in (query_args or {}).items():
            self.set_query_arg(key, value)
        if content is not None:
            self.add_content(content)

    # Method and URL

    def get_method(self) -> Method:
        return self._method

    def set_method(self, method: Method | str) -> None:
        self._method = Method.coerce(method)

    method = property(get_method, set_method)

    def get_url(self) -> str | None:
        return self._url

    def set_url(self, url: str) -> None:
        """Set the target URL, raising :class:`MalformedURL` unless it is absolute http(s)."""
        validate_url(url)
        self._url = url

    url = property(get_url, set_url)

    # Headers and query args

    def set_header(self, key: str, value: str) -> None:
        key, value = str(key), str(value)
        if self.headers_validation is HeadersValidation.YES:
            if not HEADER_NAME_REGEX.match(key):
                raise InvalidHeader(f"Invalid header name {key!r}")
            if any(char in value for char in HEADER_VALUE_FORBIDDEN):
                raise InvalidHeader(f"Invalid characters in value of header {key!r}")
        # Names are case-insensitive; the latest spelling replaces earlier ones.
        for existing in [k for k in self._headers if k.lower() == key.lower()]:
            del self._headers[existing]
        self._headers[key] = value

    def get_headers(self) -> dict[str, str]:
        return dict(self._headers)

    def set_query_arg(self, key: str, value: typing.Any) -> None:
        self._query_args[str(key)] = str(value)

    def get_query_args(self) -> dict[str, str]:
        return dict(self._query_args)

    # Body

    def get_content(self) -> Content | None:
        return self._content

    content = property(get_content)

    def add_content(self, content: Content | bytes | str) -> None:
        if not isinstance(content, _CONTENT_TYPES):
            content = RawContent(content)
        self._replace_body(content)

    def add_form_url_encoded_content(self, key: str, value: str) -> None:
        body = self._content
        if not isinstance(body, FormUrlEncodedContent):
            body = FormUrlEncodedContent()
            self._replace_body(body)
        body.add(key, value)

    def add_multipart_form_data_content(
        self, key: str, value: PartValue, file_name: str | None = None
    ) -> None:
        body = self._content
        if not isinstance(body, MultipartFormDataContent):
            body = MultipartFormDataContent()
            self._replace_body(body)
        body.add(key, value, file_name)

    def _replace_body(self, content: Content) -> None:
        current = self._content
        if current is not None and current.kind != content.kind:
            if self.strict_body:
                raise UnsupportedBodyCombination(
                    f"Request already has a {current.kind} body, refusing to add {content.kind} content"
                )
            logger.debug("Discarding %s body in favour of %s content", current.kind, content.kind)
        self._content = content

    def __repr__(self) -> str:
        return f"<Request({self._method.value!r}, {self._url!r})>"


class Response:
    """
    A completed exchange, wrapping the transport's raw result.

    The body is read from the transport once, on first access, and buffered.
    Every materializer is therefore repeatable and they all agree with each
    other. Use the ``aread_*`` variants with responses produced by an async
    transport in streaming mode.
    """

    def __init__(self, raw_result: httpx.Response | None = None) -> None:
        self._raw = raw_result
        self._content: bytes | None = None

    def _bound(self) -> httpx.Response:
        if self._raw is None:
            raise MissingTransportResult()
        return self._raw

    def get_raw_result(self) -> httpx.Response | None:
        return self._raw

    def get_status_code(self) -> int:
        return int(self._bound().status_code)

    def get_status_class(self) -> StatusClass:
        """
        Classify the status by its leading digit.

        Raises ``ValueError`` for informational (1xx) and out-of-range codes,
        which belong to no status class. ``get_status_code()`` still works
        for those.
        """
        return StatusClass.from_status_code(self.get_status_code())

    def get_reason_phrase(self) -> str:
        return self._bound().reason_phrase

    def get_headers(self) -> dict[str, str]:
        return dict(self._bound().headers.items())

    # Body materializers

    def read_as_bytes(self) -> bytes:
        raw = self._bound()
        if self._content is None:
            with map_transport_errors(_request_of(raw)):
                self._content = raw.read()
        return self._content

    def read_as_text(self) -> str:
        self.read_as_bytes()
        return self._bound().text

    def read_as_stream(self) -> typing.BinaryIO:
        return io.BytesIO(self.read_as_bytes())

    async def aread_as_bytes(self) -> bytes:
        raw = self._bound()
        if self._content is None:
            with map_transport_errors(_request_of(raw)):
                self._content = await raw.aread()
        return self._content

    async def aread_as_text(self) -> str:
        await self.aread_as_bytes()
        return self._bound().text

    async def aread_as_stream(self) -> typing.BinaryIO:
        return io.BytesIO(await self.aread_as_bytes())

    # Resource handling

    def close(self) -> None:
        if self._raw is not None:
            self._raw.close()

    async def aclose(self) -> None:
        if self._raw is not None:
            await self._raw.aclose()

    def __enter__(self) -> Response:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    async def __aenter__(self) -> Response:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        if self._raw is None:
            return "<Response [unbound]>"
        return f"<Response [{self._raw.status_code} {self._raw.reason_phrase}]>"


def _request_of(raw: httpx.Response) -> httpx.Request | None:
    try:
        return raw.request
    except RuntimeError:
        return None
