"""
Request body kinds.

A request carries at most one body at a time: raw bytes, a form-urlencoded
field list or a multipart/form-data part list. Each kind knows how to render
itself to wire bytes plus the headers describing them.
"""

from __future__ import annotations

import mimetypes
import os
import typing

from ._urlparse import form_encode

__all__ = [
    "Content",
    "FormUrlEncodedContent",
    "MultipartFormDataContent",
    "MultipartPart",
    "RawContent",
]

PartValue = typing.Union[bytes, str, typing.BinaryIO]

_NAME_ESCAPES = {'"': "%22", "\r": "%0D", "\n": "%0A"}


def _escape_param(value: str) -> str:
    return "".join(_NAME_ESCAPES.get(char, char) for char in value)


class RawContent:
    kind = "raw"

    def __init__(self, data: bytes | str, media_type: str | None = None) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
            if media_type is None:
                media_type = "text/plain; charset=utf-8"
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"Raw content must be bytes or str, not {type(data).__name__}")
        self.data = bytes(data)
        self.media_type = media_type

    def encode(self) -> tuple[dict[str, str], bytes]:
        headers = {"Content-Length": str(len(self.data))}
        if self.media_type:
            headers["Content-Type"] = self.media_type
        return headers, self.data

    def __repr__(self) -> str:
        return f"<RawContent [{len(self.data)} bytes]>"


class FormUrlEncodedContent:
    kind = "form"
    media_type = "application/x-www-form-urlencoded"

    def __init__(self, fields: typing.Iterable[tuple[str, str]] = ()) -> None:
        self._fields: list[tuple[str, str]] = [(str(k), str(v)) for k, v in fields]

    def add(self, key: str, value: str) -> None:
        self._fields.append((str(key), str(value)))

    @property
    def fields(self) -> list[tuple[str, str]]:
        return list(self._fields)

    def encode(self) -> tuple[dict[str, str], bytes]:
        body = form_encode(self._fields).encode("ascii")
        return {"Content-Type": self.media_type, "Content-Length": str(len(body))}, body

    def __repr__(self) -> str:
        return f"<FormUrlEncodedContent {self._fields!r}>"


class MultipartPart:
    """One named part of a multipart/form-data body."""

    def __init__(
        self,
        name: str,
        value: PartValue,
        file_name: str | None = None,
        content_type: str | None = None,
    ) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Part name must be str, not {type(name).__name__}")
        if not isinstance(value, (bytes, bytearray, str)) and not hasattr(value, "read"):
            raise TypeError(
                f"Part value must be bytes, str or a binary file-like object, not {type(value).__name__}"
            )
        self.name = name
        self.value = value
        self.file_name = file_name
        if content_type is None and file_name is not None:
            content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"
        self.content_type = content_type

    def payload(self) -> bytes:
        value = self.value
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray)):
            return bytes(value)
        if hasattr(value, "seekable") and value.seekable():
            value.seek(0)
        data = value.read()
        return data.encode("utf-8") if isinstance(data, str) else bytes(data)

    def render_headers(self) -> bytes:
        disposition = f'form-data; name="{_escape_param(self.name)}"'
        if self.file_name is not None:
            disposition += f'; filename="{_escape_param(self.file_name)}"'
        lines = [f"Content-Disposition: {disposition}"]
        if self.content_type is not None:
            lines.append(f"Content-Type: {self.content_type}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")

    def __repr__(self) -> str:
        if self.file_name is None:
            return f"<MultipartPart {self.name!r}>"
        return f"<MultipartPart {self.name!r} file_name={self.file_name!r}>"


class MultipartFormDataContent:
    kind = "multipart"

    def __init__(self, boundary: bytes | None = None) -> None:
        self.boundary = boundary if boundary is not None else os.urandom(16).hex().encode("ascii")
        self._parts: list[MultipartPart] = []

    @property
    def media_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary.decode('ascii')}"

    def add(self, name: str, value: PartValue, file_name: str | None = None) -> MultipartPart:
        part = MultipartPart(name, value, file_name)
        self._parts.append(part)
        return part

    @property
    def parts(self) -> list[MultipartPart]:
        return list(self._parts)

    def encode(self) -> tuple[dict[str, str], bytes]:
        chunks: list[bytes] = []
        for part in self._parts:
            chunks.extend([b"--", self.boundary, b"\r\n", part.render_headers(), part.payload(), b"\r\n"])
        chunks.extend([b"--", self.boundary, b"--\r\n"])
        body = b"".join(chunks)
        return {"Content-Type": self.media_type, "Content-Length": str(len(body))}, body

    def __repr__(self) -> str:
        return f"<MultipartFormDataContent {self._parts!r}>"


Content = typing.Union[RawContent, FormUrlEncodedContent, MultipartFormDataContent]
