import os
import typing

import httpx
import pytest


# The async transports are exercised on asyncio only.
@pytest.fixture
def anyio_backend():
    return "asyncio"


ENVIRONMENT_VARIABLES = {
    "HTTPSEAM_TIMEOUT",
    "HTTPSEAM_VERIFY",
    "HTTPSEAM_FOLLOW_REDIRECTS",
    "HTTPSEAM_PROXY",
    "HTTPSEAM_STREAM",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "NO_PROXY",
}


@pytest.fixture(scope="function", autouse=True)
def clean_environ():
    """Keeps os.environ clean for every test without having to mock os.environ"""
    original_environ = os.environ.copy()
    os.environ.clear()
    os.environ.update(
        {
            k: v
            for k, v in original_environ.items()
            if k not in ENVIRONMENT_VARIABLES and k.upper() not in ENVIRONMENT_VARIABLES
        }
    )
    yield
    os.environ.clear()
    os.environ.update(original_environ)


class Recorder:
    """Transport handler that answers 200 and remembers every request it saw."""

    def __init__(self, status_code: int = 200, **response_kwargs: typing.Any) -> None:
        self.status_code = status_code
        self.response_kwargs = response_kwargs or {"text": "Hello, world!"}
        self.requests: typing.List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, **self.response_kwargs)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
