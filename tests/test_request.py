import io
import logging

import pytest

import httpseam


def test_request_defaults():
    request = httpseam.Request()
    assert request.get_method() is httpseam.Method.GET
    assert request.get_url() is None
    assert request.get_headers() == {}
    assert request.get_query_args() == {}
    assert request.get_content() is None


def test_set_url():
    request = httpseam.Request()
    request.set_url("https://api.example.com/items")
    assert request.get_url() == "https://api.example.com/items"
    assert request.url == "https://api.example.com/items"


@pytest.mark.parametrize("url", ["", "example.com", "https://exa mple.com", "ftp://example.com"])
def test_set_url_rejects_malformed(url):
    request = httpseam.Request(url="https://example.com/original")
    with pytest.raises(httpseam.MalformedURL):
        request.set_url(url)
    assert request.get_url() == "https://example.com/original"


def test_constructor_validates_url():
    with pytest.raises(httpseam.MalformedURL):
        httpseam.Request("GET", "/relative")


def test_set_method():
    request = httpseam.Request()
    request.set_method(httpseam.Method.DELETE)
    assert request.get_method() is httpseam.Method.DELETE
    request.method = "patch"
    assert request.method is httpseam.Method.PATCH


def test_set_method_rejects_unknown_verb():
    request = httpseam.Request()
    with pytest.raises(ValueError):
        request.set_method("BREW")


def test_set_header_last_write_wins():
    request = httpseam.Request()
    request.set_header("Accept", "text/plain")
    request.set_header("Accept", "text/plain")
    assert request.get_headers() == {"Accept": "text/plain"}
    request.set_header("Accept", "application/json")
    assert request.get_headers() == {"Accept": "application/json"}


def test_set_header_names_are_case_insensitive():
    request = httpseam.Request()
    request.set_header("Accept", "a")
    request.set_header("X-Token", "t")
    request.set_header("accept", "b")
    assert request.get_headers() == {"X-Token": "t", "accept": "b"}


def test_get_headers_returns_a_copy():
    request = httpseam.Request()
    request.set_header("X-Token", "abc")
    headers = request.get_headers()
    headers["X-Token"] = "changed"
    headers["X-Other"] = "1"
    assert request.get_headers() == {"X-Token": "abc"}


def test_set_query_arg_last_write_wins():
    request = httpseam.Request()
    request.set_query_arg("page", "1")
    request.set_query_arg("page", "1")
    request.set_query_arg("size", 50)
    assert request.get_query_args() == {"page": "1", "size": "50"}
    request.set_query_arg("page", "2")
    assert request.get_query_args() == {"page": "2", "size": "50"}


def test_get_query_args_returns_a_copy():
    request = httpseam.Request()
    request.set_query_arg("a", "1")
    request.get_query_args()["a"] = "2"
    assert request.get_query_args() == {"a": "1"}


@pytest.mark.parametrize(
    "name, value",
    [("Bad Header", "x"), ("X-Colon:", "x"), ("", "x"), ("X-Split", "a\r\nInjected: 1"), ("X-Null", "a\0")],
)
def test_header_validation(name, value):
    request = httpseam.Request()
    with pytest.raises(httpseam.InvalidHeader):
        request.set_header(name, value)
    assert request.get_headers() == {}


def test_header_validation_disabled():
    request = httpseam.Request(headers_validation=httpseam.HeadersValidation.NO)
    request.set_header("Bad Header", "x")
    assert request.get_headers() == {"Bad Header": "x"}


def test_add_content():
    request = httpseam.Request()
    request.add_content(b"payload")
    content = request.get_content()
    assert isinstance(content, httpseam.RawContent)
    assert content.data == b"payload"

    request.add_content("text")
    assert request.get_content().data == b"text"


def test_form_urlencoded_content_accumulates():
    request = httpseam.Request()
    request.add_form_url_encoded_content("a", "1")
    request.add_form_url_encoded_content("b", "2")
    content = request.get_content()
    assert isinstance(content, httpseam.FormUrlEncodedContent)
    assert content.fields == [("a", "1"), ("b", "2")]


def test_multipart_parts_in_addition_order():
    request = httpseam.Request()
    request.add_multipart_form_data_content("name", "Ann")
    request.add_multipart_form_data_content("file", b"\x00\x01 data", "a.txt")

    content = request.get_content()
    assert isinstance(content, httpseam.MultipartFormDataContent)
    parts = content.parts
    assert len(parts) == 2
    assert parts[0].name == "name"
    assert parts[0].file_name is None
    assert parts[1].name == "file"
    assert parts[1].file_name == "a.txt"


def test_multipart_stream_payload():
    request = httpseam.Request()
    request.add_multipart_form_data_content("upload", io.BytesIO(b"streamed"), "upload.bin")
    (part,) = request.get_content().parts
    assert part.payload() == b"streamed"
    assert part.content_type == "application/octet-stream"


def test_switching_body_kind_discards_previous_body():
    request = httpseam.Request()
    request.add_form_url_encoded_content("a", "1")
    request.add_multipart_form_data_content("b", "2")
    content = request.get_content()
    assert isinstance(content, httpseam.MultipartFormDataContent)
    assert [part.name for part in content.parts] == ["b"]

    request.add_form_url_encoded_content("c", "3")
    assert request.get_content().fields == [("c", "3")]

    request.add_content(b"raw")
    assert isinstance(request.get_content(), httpseam.RawContent)

    request.add_multipart_form_data_content("d", "4")
    assert [part.name for part in request.get_content().parts] == ["d"]


def test_body_overwrite_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="httpseam.models")
    request = httpseam.Request()
    request.add_content(b"raw")
    request.add_form_url_encoded_content("a", "1")
    assert "Discarding raw body in favour of form content" in caplog.text


def test_strict_body_refuses_kind_switch():
    request = httpseam.Request(strict_body=True)
    request.add_form_url_encoded_content("a", "1")
    with pytest.raises(httpseam.UnsupportedBodyCombination):
        request.add_multipart_form_data_content("b", "2")
    with pytest.raises(httpseam.UnsupportedBodyCombination):
        request.add_content(b"raw")
    assert request.get_content().fields == [("a", "1")]

    request.add_form_url_encoded_content("c", "3")
    assert request.get_content().fields == [("a", "1"), ("c", "3")]


def test_request_repr():
    request = httpseam.Request("POST", "https://example.com/")
    assert repr(request) == "<Request('POST', 'https://example.com/')>"
