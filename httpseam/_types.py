from __future__ import annotations

import enum

__all__ = ["HeadersValidation", "Method", "StatusClass"]


class Method(str, enum.Enum):
    POST = "POST"
    PUT = "PUT"
    GET = "GET"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    DELETE = "DELETE"

    @classmethod
    def coerce(cls, value: Method | str) -> Method:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {value!r}") from None

    def __str__(self) -> str:
        return self.value


class StatusClass(enum.Enum):
    """Coarse category of an HTTP status, by its leading digit."""

    SUCCESSFUL = "successful"  # 2xx
    REDIRECTED = "redirected"  # 3xx
    ERROR = "error"  # 4xx
    FAULT = "fault"  # 5xx

    @classmethod
    def from_status_code(cls, status_code: int) -> StatusClass:
        if not 200 <= status_code <= 599:
            raise ValueError(f"Status code {status_code} has no status class")
        return _BY_LEADING_DIGIT[status_code // 100]


_BY_LEADING_DIGIT = {
    2: StatusClass.SUCCESSFUL,
    3: StatusClass.REDIRECTED,
    4: StatusClass.ERROR,
    5: StatusClass.FAULT,
}


class HeadersValidation(enum.Enum):
    YES = "yes"
    NO = "no"
