from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    import httpx

__all__ = [
    "HTTPSeamError",
    "InvalidHeader",
    "MalformedURL",
    "MissingTransportResult",
    "TransportFailure",
    "TransportTimeout",
    "UnsupportedBodyCombination",
]


class HTTPSeamError(Exception):
    """Base class for every error raised by httpseam."""


class MalformedURL(HTTPSeamError, ValueError):
    pass


class InvalidHeader(HTTPSeamError, ValueError):
    pass


class MissingTransportResult(HTTPSeamError):
    def __init__(self, message: str = "Response is not bound to a transport result") -> None:
        super().__init__(message)


class UnsupportedBodyCombination(HTTPSeamError):
    pass


class TransportFailure(HTTPSeamError):
    """
    The transport could not complete the exchange.

    Raised for connection, DNS, TLS and protocol failures. A response carrying
    a 4xx or 5xx status is never reported this way.
    """

    def __init__(self, message: str, *, request: httpx.Request | None = None) -> None:
        super().__init__(message)
        self._request = request

    @property
    def request(self) -> httpx.Request:
        if self._request is None:
            raise RuntimeError("The .request property has not been set.")
        return self._request

    @request.setter
    def request(self, request: httpx.Request) -> None:
        self._request = request


class TransportTimeout(TransportFailure):
    pass
