from __future__ import annotations

import json
import os
import sys
import time
import typing

import click
from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from ._client import Client
from ._config import TransportConfig
from ._exceptions import HTTPSeamError
from ._models import Request, Response
from ._types import StatusClass

_STATUS_COLORS = {
    StatusClass.SUCCESSFUL: "green",
    StatusClass.REDIRECTED: "yellow",
    StatusClass.ERROR: "red",
    StatusClass.FAULT: "bold red",
}


def _status_color(response: Response) -> str:
    """Return a rich color name based on the response status class."""
    try:
        return _STATUS_COLORS[response.get_status_class()]
    except ValueError:
        return "cyan"


def is_binary_content(content: bytes) -> bool:
    return b"\0" in content


def is_binary_content_type(content_type: str) -> bool:
    text_types = (
        "text/",
        "application/json",
        "application/xml",
        "application/javascript",
        "application/x-www-form-urlencoded",
    )
    ct = content_type.lower().split(";")[0].strip()
    return not any(ct.startswith(t) for t in text_types) and ct != ""


def _status_line(response: Response) -> tuple[str, str, str]:
    raw = response.get_raw_result()
    http_version = getattr(raw, "http_version", "HTTP/1.1")
    return http_version, str(response.get_status_code()), response.get_reason_phrase()


def _body_lines(response: Response) -> tuple[str, str | None]:
    """Classify the body as ("binary" | "json" | "text", rendered text)."""
    content = response.read_as_bytes()
    if not content:
        return "text", None
    content_type = response.get_headers().get("content-type", "")
    if is_binary_content_type(content_type) or is_binary_content(content):
        return "binary", f"<{len(content)} bytes of binary data>"
    text = response.read_as_text()
    if "application/json" in content_type:
        try:
            return "json", json.dumps(json.loads(text), indent=4, ensure_ascii=False)
        except (json.JSONDecodeError, TypeError):
            pass
    return "text", text


# ---------------------------------------------------------------------------
# Plain-text formatter (used with --no-color or when stdout is not a tty)
# ---------------------------------------------------------------------------


def format_response_plain(response: Response) -> str:
    lines: list[str] = [" ".join(_status_line(response)).rstrip()]
    for key, value in response.get_headers().items():
        lines.append(f"{key}: {value}")
    lines.append("")
    _, body = _body_lines(response)
    if body is not None:
        lines.append(body)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Rich formatter
# ---------------------------------------------------------------------------


def print_response_rich(console: Console, response: Response) -> None:
    """Pretty-print a response using rich."""
    http_version, status_code, reason = _status_line(response)
    color = _status_color(response)

    status_line = Text()
    status_line.append(f"{http_version} ", style="bold dim")
    status_line.append(status_code, style=f"bold {color}")
    if reason:
        status_line.append(f" {reason}", style=color)
    console.print(status_line)

    for key, value in response.get_headers().items():
        header_text = Text()
        header_text.append(key, style="dim cyan")
        header_text.append(": ", style="dim")
        header_text.append(value)
        console.print(header_text)

    console.print()

    kind, body = _body_lines(response)
    if body is None:
        return
    if kind == "binary":
        console.print(f"[dim]{body}[/dim]", markup=True)
    elif kind == "json":
        console.print(Syntax(body, "json", theme="monokai"))
    else:
        console.print(body, markup=False, highlight=False)


# ---------------------------------------------------------------------------
# Option parsing helpers
# ---------------------------------------------------------------------------


def parse_header(header: str) -> tuple[str, str]:
    """Parse a 'Key: Value' header string."""
    if ":" not in header:
        raise click.BadParameter(
            f"Invalid header format: '{header}'. Expected 'Key: Value'."
        )
    key, _, value = header.partition(":")
    return key.strip(), value.strip()


def parse_pair(pair: str) -> tuple[str, str]:
    """Parse a 'key=value' string."""
    if "=" not in pair:
        raise click.BadParameter(f"Invalid format: '{pair}'. Expected 'key=value'.")
    key, _, value = pair.partition("=")
    return key, value


def build_cli_request(
    url: str,
    method: str,
    headers: typing.Iterable[str],
    query: typing.Iterable[str],
    data: typing.Iterable[str],
    form: typing.Iterable[str],
    content: str | None,
) -> Request:
    request = Request(method, url)
    for header in headers:
        request.set_header(*parse_header(header))
    for pair in query:
        request.set_query_arg(*parse_pair(pair))
    if content is not None:
        request.add_content(content.encode("utf-8"))
    for pair in data:
        request.add_form_url_encoded_content(*parse_pair(pair))
    for pair in form:
        key, value = parse_pair(pair)
        if value.startswith("@"):
            path = value[1:]
            with open(path, "rb") as f:
                request.add_multipart_form_data_content(key, f.read(), os.path.basename(path))
        else:
            request.add_multipart_form_data_content(key, value)
    return request


# ---------------------------------------------------------------------------
# CLI command
# ---------------------------------------------------------------------------


@click.command(help="Send one HTTP request and print the response.")
@click.argument("url")
@click.option("-m", "--method", default="GET", help="HTTP method.")
@click.option(
    "-H",
    "--header",
    "headers",
    multiple=True,
    help='Add a header, e.g. -H "Authorization: Bearer token".',
)
@click.option("-q", "--query", multiple=True, help="Add a query argument, key=value.")
@click.option("-d", "--data", multiple=True, help="Add a form-urlencoded field, key=value.")
@click.option(
    "-F", "--form", multiple=True, help="Add a multipart part, key=value or key=@path."
)
@click.option(
    "-c", "--content", default=None, help="Raw content to send in the request body."
)
@click.option("--timeout", type=float, default=None, help="Timeout in seconds.")
@click.option(
    "--follow-redirects", is_flag=True, default=False, help="Follow redirects."
)
@click.option("--no-verify", is_flag=True, default=False, help="Skip TLS verification.")
@click.option(
    "--timing", is_flag=True, default=False, help="Show total request time."
)
@click.option(
    "--no-color", is_flag=True, default=False, help="Disable colored output."
)
def main(
    url: str,
    method: str,
    headers: tuple[str, ...],
    query: tuple[str, ...],
    data: tuple[str, ...],
    form: tuple[str, ...],
    content: str | None,
    timeout: float | None,
    follow_redirects: bool,
    no_verify: bool,
    timing: bool,
    no_color: bool,
) -> None:
    use_rich = not no_color and sys.stdout.isatty()

    try:
        config = TransportConfig.from_environ()
        if timeout is not None:
            config.timeout = timeout
        if follow_redirects:
            config.follow_redirects = True
        if no_verify:
            config.verify = False

        request = build_cli_request(url, method, headers, query, data, form, content)
        with Client(config=config) as client:
            start_time = time.monotonic()
            response = client.perform_request(request)
            response.read_as_bytes()
            elapsed_ms = (time.monotonic() - start_time) * 1000

            if use_rich:
                console = Console()
                print_response_rich(console, response)
                if timing:
                    console.print()
                    console.print(f"[dim]⏱  Total: {elapsed_ms:.1f}ms[/dim]")
            else:
                click.echo(format_response_plain(response))
                if timing:
                    click.echo()
                    click.echo(f"Total: {elapsed_ms:.1f}ms")

            try:
                successful = response.get_status_class() is StatusClass.SUCCESSFUL
            except ValueError:
                successful = False
            if not successful:
                sys.exit(1)

    except (HTTPSeamError, ValueError, OSError) as exc:
        if use_rich:
            console = Console(stderr=True)
            console.print(f"[bold red]{type(exc).__name__}[/bold red]: {exc}")
        else:
            click.echo(f"{type(exc).__name__}: {exc}", err=True)
        sys.exit(1)
