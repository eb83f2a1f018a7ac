import io

import pytest

import httpseam


def test_raw_content_bytes():
    headers, body = httpseam.RawContent(b"Hello, world!").encode()
    assert body == b"Hello, world!"
    assert headers == {"Content-Length": "13"}


def test_raw_content_text():
    headers, body = httpseam.RawContent("héllo").encode()
    assert body == "héllo".encode("utf-8")
    assert headers["Content-Type"] == "text/plain; charset=utf-8"


def test_raw_content_media_type():
    headers, _ = httpseam.RawContent(b"{}", media_type="application/json").encode()
    assert headers["Content-Type"] == "application/json"


def test_raw_content_rejects_other_types():
    with pytest.raises(TypeError):
        httpseam.RawContent(123)  # type: ignore[arg-type]


def test_form_urlencoded_encode():
    content = httpseam.FormUrlEncodedContent()
    content.add("name", "Ann Lee")
    content.add("tags", "a&b")
    headers, body = content.encode()
    assert body == b"name=Ann+Lee&tags=a%26b"
    assert headers == {
        "Content-Type": "application/x-www-form-urlencoded",
        "Content-Length": str(len(body)),
    }


def test_multipart_encode():
    content = httpseam.MultipartFormDataContent(boundary=b"+++boundary+++")
    content.add("name", "Ann")
    content.add("file", b"<file content>", "a.txt")
    headers, body = content.encode()

    assert headers["Content-Type"] == "multipart/form-data; boundary=+++boundary+++"
    assert headers["Content-Length"] == str(len(body))
    assert body == (
        b"--+++boundary+++\r\n"
        b'Content-Disposition: form-data; name="name"\r\n'
        b"\r\n"
        b"Ann\r\n"
        b"--+++boundary+++\r\n"
        b'Content-Disposition: form-data; name="file"; filename="a.txt"\r\n'
        b"Content-Type: text/plain\r\n"
        b"\r\n"
        b"<file content>\r\n"
        b"--+++boundary+++--\r\n"
    )


def test_multipart_escapes_names():
    content = httpseam.MultipartFormDataContent(boundary=b"b")
    content.add('say "hi"', "x", 'evil"\r\nname.txt')
    _, body = content.encode()
    assert b'name="say %22hi%22"; filename="evil%22%0D%0Aname.txt"' in body


def test_multipart_stream_is_rewound_between_encodes():
    content = httpseam.MultipartFormDataContent(boundary=b"b")
    content.add("upload", io.BytesIO(b"data"), "upload.bin")
    assert content.encode() == content.encode()


def test_multipart_generated_boundary():
    first = httpseam.MultipartFormDataContent()
    second = httpseam.MultipartFormDataContent()
    assert first.boundary != second.boundary
    assert len(first.boundary) == 32


def test_multipart_part_rejects_bad_value():
    with pytest.raises(TypeError):
        httpseam.MultipartPart("n", 3.14)  # type: ignore[arg-type]


def test_multipart_parts_returns_a_copy():
    content = httpseam.MultipartFormDataContent()
    content.add("a", "1")
    content.parts.clear()
    assert len(content.parts) == 1
