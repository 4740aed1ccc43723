import pytest

from wrykit.errors import InvalidHeaderNameError, InvalidHeaderValueError, InvalidMethodError
from wrykit.request import Method, Request, RequestBuilder, RequestParts, parse_method


def test_default_request():
    request = Request()
    assert request.method == Method.GET
    assert request.uri == ""
    assert request.body == b""
    assert len(request.headers) == 0


def test_request_with_body_only():
    request = Request(body=b"payload")
    assert request.body == b"payload"
    assert request.head == RequestParts()


@pytest.mark.parametrize("name", ["GET", "POST", "PUT", "DELETE", "PATCH"])
def test_parse_standard_methods(name):
    method = parse_method(name)
    assert isinstance(method, Method)
    assert method == getattr(Method, name)


def test_parse_method_from_bytes():
    assert parse_method(b"PUT") == Method.PUT


def test_methods_are_case_sensitive():
    method = parse_method("get")
    assert method == "get"
    assert method != Method.GET


def test_extension_method_accepted():
    assert parse_method("PROPFIND") == "PROPFIND"


@pytest.mark.parametrize("value", ["", "GE T", "POST\n", b"\xff"])
def test_invalid_methods(value):
    with pytest.raises(InvalidMethodError):
        parse_method(value)


def test_parse_method_keeps_method_instance():
    assert parse_method(Method.POST) is Method.POST


def test_builder_sets_all_fields():
    request = (
        RequestBuilder()
        .method("POST")
        .uri("wry://examples/form.html")
        .header("Range", "bytes=0-")
        .body(b"a=1&b=2")
    )
    assert request.method == Method.POST
    assert request.uri == "wry://examples/form.html"
    assert request.headers.get("range") == "bytes=0-"
    assert request.body == b"a=1&b=2"


def test_builder_defers_header_error_until_body():
    builder = RequestBuilder().header("Foo", "Bar\r\n")
    with pytest.raises(InvalidHeaderValueError):
        builder.body(b"")


def test_builder_reports_first_error():
    builder = RequestBuilder().method("").header("bad name", "x")
    with pytest.raises(InvalidMethodError):
        builder.body(b"")


def test_builder_bad_header_name():
    with pytest.raises(InvalidHeaderNameError):
        RequestBuilder().header("a b", "x").body(b"")


def test_into_parts_round_trip():
    request = RequestBuilder().uri("wry://index.html").body(b"data")
    head, body = request.into_parts()
    assert Request(head=head, body=body) == request


def test_requests_from_one_builder_are_independent():
    builder = RequestBuilder().header("a", "1")
    first = builder.body(b"")
    builder.header("a", "2")
    second = builder.body(b"")
    assert first.headers.get_all("a") == ["1"]
    assert second.headers.get_all("a") == ["1", "2"]