# ruff: noqa: I001
from .__about__ import __description__, __title__, __version__
from ._client import AsyncClient, Client
from ._config import TransportConfig
from ._content import (
    FormUrlEncodedContent,
    MultipartFormDataContent,
    MultipartPart,
    RawContent,
)
from ._exceptions import (
    HTTPSeamError,
    InvalidHeader,
    MalformedURL,
    MissingTransportResult,
    TransportFailure,
    TransportTimeout,
    UnsupportedBodyCombination,
)
from ._models import Request, Response
from ._transports import (
    AsyncBaseTransport,
    AsyncHTTPXTransport,
    AsyncMockTransport,
    BaseTransport,
    HTTPXTransport,
    MockTransport,
)
from ._types import HeadersValidation, Method, StatusClass
from ._urlparse import is_valid_url, merge_query

__all__ = sorted(
    (
        member
        for member in list(vars().keys())
        if not member.startswith("_")
        or member in ["__description__", "__title__", "__version__"]
    ),
    key=str.casefold,
)
