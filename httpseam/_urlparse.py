"""
URL parsing, validation and query-string composition.

Parsing follows RFC 3986 with the WHATWG leniencies browsers apply to hosts.
Nothing here touches the network: hosts are IDNA-encoded but never resolved.
"""

from __future__ import annotations

import ipaddress
import re
import typing

import idna

from ._exceptions import MalformedURL

MAX_URL_LENGTH = 65536

SUPPORTED_SCHEMES = frozenset({"http", "https"})
DEFAULT_PORTS = {"http": 80, "https": 443}

UNRESERVED_CHARACTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
SUB_DELIMS = "!$&'()*+,;="

PERCENT_ENCODED_REGEX = re.compile("%[A-Fa-f0-9]{2}")

_ALWAYS_EXCLUDED = (0x20, 0x22, 0x3C, 0x3E)
_PATH_EXCLUDED = _ALWAYS_EXCLUDED + (0x23, 0x3F, 0x60, 0x7B, 0x7D)
_USERINFO_EXTRA = (0x2F, 0x3B, 0x3D, 0x40, 0x5B, 0x5C, 0x5D, 0x5E, 0x7C)


def _safe_chars(*excluded: int) -> str:
    excluded_set = set(excluded)
    return "".join(chr(i) for i in range(0x20, 0x7F) if i not in excluded_set)


FRAG_SAFE = _safe_chars(*_ALWAYS_EXCLUDED, 0x60)
QUERY_SAFE = _safe_chars(*_ALWAYS_EXCLUDED, 0x23)
PATH_SAFE = _safe_chars(*_PATH_EXCLUDED)
USERINFO_SAFE = _safe_chars(*_PATH_EXCLUDED, *_USERINFO_EXTRA)

# Characters left as-is inside a single query key or value. Everything that
# delimits pairs ("&", "=", "+", "#") must be escaped.
QUERY_ARG_SAFE = "!$'()*,;:@/?"

URL_REGEX = re.compile(
    r"(?:(?P<scheme>([a-zA-Z][a-zA-Z0-9+.-]*)?):)?"
    r"(?://(?P<authority>[^/?#]*))?"
    r"(?P<path>[^?#]*)"
    r"(?:\?(?P<query>[^#]*))?"
    r"(?:#(?P<fragment>.*))?"
)

AUTHORITY_REGEX = re.compile(
    r"(?:(?P<userinfo>.*)@)?(?P<host>(\[.*\]|[^:@]*)):?(?P<port>.*)?"
)

IPv4_STYLE_HOSTNAME = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$")
IPv6_STYLE_HOSTNAME = re.compile(r"^\[.*\]$")


class ParseResult(typing.NamedTuple):
    scheme: str
    userinfo: str
    host: str
    port: int | None
    path: str
    query: str | None
    fragment: str | None

    @property
    def authority(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return "".join([
            f"{self.userinfo}@" if self.userinfo else "",
            host,
            f":{self.port}" if self.port is not None else "",
        ])

    def __str__(self) -> str:
        authority = self.authority
        return "".join([
            f"{self.scheme}:" if self.scheme else "",
            f"//{authority}" if authority else "",
            self.path,
            f"?{self.query}" if self.query is not None else "",
            f"#{self.fragment}" if self.fragment is not None else "",
        ])


def urlparse(url: str) -> ParseResult:
    if len(url) > MAX_URL_LENGTH:
        raise MalformedURL("URL too long")

    for position, char in enumerate(url):
        if char.isascii() and not char.isprintable():
            raise MalformedURL(
                f"Invalid non-printable ASCII character in URL, {char!r} at position {position}."
            )

    url_dict = URL_REGEX.match(url).groupdict()  # type: ignore[union-attr]
    authority_dict = AUTHORITY_REGEX.match(url_dict["authority"] or "").groupdict()  # type: ignore[union-attr]

    scheme = (url_dict["scheme"] or "").lower()
    userinfo = quote(authority_dict["userinfo"] or "", safe=USERINFO_SAFE)
    host = encode_host(authority_dict["host"] or "")
    port = normalize_port(authority_dict["port"], scheme)
    path = url_dict["path"] or ""
    query = url_dict["query"]
    fragment = url_dict["fragment"]

    has_authority = bool(userinfo or host or port is not None)
    validate_path(path, has_scheme=bool(scheme), has_authority=has_authority)
    if scheme or has_authority:
        path = normalize_path(path)

    return ParseResult(
        scheme,
        userinfo,
        host,
        port,
        quote(path, safe=PATH_SAFE),
        None if query is None else quote(query, safe=QUERY_SAFE),
        None if fragment is None else quote(fragment, safe=FRAG_SAFE),
    )


def encode_host(host: str) -> str:
    if not host:
        return ""

    if IPv4_STYLE_HOSTNAME.match(host):
        try:
            ipaddress.IPv4Address(host)
        except ipaddress.AddressValueError:
            raise MalformedURL(f"Invalid IPv4 address: {host!r}")
        return host

    if IPv6_STYLE_HOSTNAME.match(host):
        try:
            ipaddress.IPv6Address(host[1:-1])
        except ipaddress.AddressValueError:
            raise MalformedURL(f"Invalid IPv6 address: {host!r}")
        return host[1:-1]

    if host.isascii():
        WHATWG_SAFE = '"`{}%|\\'
        return quote(host.lower(), safe=SUB_DELIMS + WHATWG_SAFE)

    try:
        return idna.encode(host.lower()).decode("ascii")
    except idna.IDNAError:
        raise MalformedURL(f"Invalid IDNA hostname: {host!r}")


def normalize_port(port: str | None, scheme: str) -> int | None:
    if not port:
        return None
    try:
        port_as_int = int(port)
    except ValueError:
        raise MalformedURL(f"Invalid port: {port!r}")
    if not 0 <= port_as_int <= 65535:
        raise MalformedURL(f"Port out of range: {port_as_int}")
    return None if port_as_int == DEFAULT_PORTS.get(scheme) else port_as_int


def validate_path(path: str, has_scheme: bool, has_authority: bool) -> None:
    if has_authority and path and not path.startswith("/"):
        raise MalformedURL("For absolute URLs, path must be empty or begin with '/'")
    if not has_scheme and not has_authority:
        if path.startswith("//"):
            raise MalformedURL("Relative URLs cannot have a path starting with '//'")
        if path.startswith(":"):
            raise MalformedURL("Relative URLs cannot have a path starting with ':'")


def normalize_path(path: str) -> str:
    if "." not in path:
        return path
    components = path.split("/")
    if "." not in components and ".." not in components:
        return path
    output: list[str] = []
    for component in components:
        if component == "..":
            if output and output != [""]:
                output.pop()
        elif component != ".":
            output.append(component)
    return "/".join(output)


def _percent_encode(string: str) -> str:
    return "".join(f"%{byte:02X}" for byte in string.encode("utf-8"))


def percent_encoded(string: str, safe: str) -> str:
    non_escaped = UNRESERVED_CHARACTERS + safe
    if not string.rstrip(non_escaped):
        return string
    return "".join(c if c in non_escaped else _percent_encode(c) for c in string)


def quote(string: str, safe: str) -> str:
    """Percent-encode ``string``, leaving existing ``%XX`` escapes intact."""
    parts: list[str] = []
    pos = 0
    for match in re.finditer(PERCENT_ENCODED_REGEX, string):
        start, end = match.start(), match.end()
        if start != pos:
            parts.append(percent_encoded(string[pos:start], safe=safe))
        parts.append(match.group(0))
        pos = end
    if pos != len(string):
        parts.append(percent_encoded(string[pos:], safe=safe))
    return "".join(parts)


def unquote(string: str) -> str:
    if "%" not in string:
        return string
    raw = bytearray()
    pos = 0
    for match in re.finditer(PERCENT_ENCODED_REGEX, string):
        raw += string[pos : match.start()].encode("utf-8")
        raw.append(int(match.group(0)[1:], 16))
        pos = match.end()
    raw += string[pos:].encode("utf-8")
    return raw.decode("utf-8", errors="replace")


def form_encode(pairs: typing.Iterable[tuple[str, str]]) -> str:
    """Encode pairs as ``application/x-www-form-urlencoded``."""
    return "&".join(
        f"{_form_escape(key)}={_form_escape(value)}" for key, value in pairs
    )


def _form_escape(value: str) -> str:
    # "%" is itself escaped, so every "%20" left here came from a space.
    return percent_encoded(value, safe="").replace("%20", "+")


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_url(url: typing.Any) -> ParseResult:
    """Parse ``url`` as an absolute http(s) URL or raise :class:`MalformedURL`."""
    if not isinstance(url, str):
        raise MalformedURL(f"URL must be a string, not {type(url).__name__}")
    if not url:
        raise MalformedURL("URL is empty")
    for position, char in enumerate(url):
        if char.isspace():
            raise MalformedURL(f"Whitespace in URL at position {position}")

    parsed = urlparse(url)
    if not parsed.scheme:
        raise MalformedURL(f"URL {url!r} is relative, an absolute URL is required")
    if parsed.scheme not in SUPPORTED_SCHEMES:
        raise MalformedURL(f"Unsupported URL scheme {parsed.scheme!r}")
    if not parsed.host:
        raise MalformedURL(f"URL {url!r} has no host")
    return parsed


def is_valid_url(url: typing.Any) -> bool:
    try:
        validate_url(url)
    except MalformedURL:
        return False
    return True


# ---------------------------------------------------------------------------
# Query composition
# ---------------------------------------------------------------------------


def parse_query(query: str | None) -> list[tuple[str, str]]:
    """Split a raw query string into ``(decoded_key, raw_segment)`` pairs."""
    if not query:
        return []
    pairs = []
    for segment in query.split("&"):
        if not segment:
            continue
        raw_key = segment.partition("=")[0]
        pairs.append((unquote(raw_key.replace("+", " ")), segment))
    return pairs


def merge_query(url: str, args: typing.Mapping[typing.Any, typing.Any] | None) -> str:
    """
    Merge ``args`` onto the query string embedded in ``url``.

    A key present in ``args`` takes the supplied value: its first embedded
    occurrence is rewritten in place and later duplicates are dropped. Keys
    only present in the URL keep their original encoding. New keys are
    appended in ``args`` order.
    """
    parsed = validate_url(url)
    if not args:
        return str(parsed)

    supplied = {str(key): str(value) for key, value in args.items()}
    pending = dict(supplied)
    segments: list[str] = []

    for key, segment in parse_query(parsed.query):
        if key in pending:
            segments.append(_query_pair(key, pending.pop(key)))
        elif key not in supplied:
            segments.append(segment)

    segments.extend(_query_pair(key, value) for key, value in pending.items())
    return str(parsed._replace(query="&".join(segments)))


def _query_pair(key: str, value: str) -> str:
    return f"{percent_encoded(key, safe=QUERY_ARG_SAFE)}={percent_encoded(value, safe=QUERY_ARG_SAFE)}"
