from __future__ import annotations

import dataclasses
import os
import typing

__all__ = ["TransportConfig"]

ENV_PREFIX = "HTTPSEAM_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {value!r}")


def _parse_timeout(name: str, value: str) -> float | None:
    if value.strip().lower() in ("", "none"):
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {value!r}") from None
    if timeout <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return timeout


@dataclasses.dataclass
class TransportConfig:
    """
    Settings for the httpx-backed transports.

    Timeouts, TLS verification, redirects and proxies are transport policy;
    the client and request layers never look at them.
    """

    timeout: float | None = 30.0
    verify: bool = True
    follow_redirects: bool = False
    proxy: str | None = None
    trust_env: bool = True
    stream: bool = False

    @classmethod
    def from_environ(cls, environ: typing.Mapping[str, str] | None = None) -> TransportConfig:
        """Build a config from ``HTTPSEAM_*`` environment variables, defaulting the rest."""
        if environ is None:
            environ = os.environ
        config = cls()

        name = ENV_PREFIX + "TIMEOUT"
        if name in environ:
            config.timeout = _parse_timeout(name, environ[name])
        for field in ("verify", "follow_redirects", "stream"):
            name = ENV_PREFIX + field.upper()
            if name in environ:
                setattr(config, field, _parse_bool(name, environ[name]))
        name = ENV_PREFIX + "PROXY"
        if environ.get(name):
            config.proxy = environ[name]
        return config

    def httpx_options(self) -> dict[str, typing.Any]:
        return {
            "timeout": self.timeout,
            "verify": self.verify,
            "follow_redirects": self.follow_redirects,
            "proxy": self.proxy,
            "trust_env": self.trust_env,
        }
