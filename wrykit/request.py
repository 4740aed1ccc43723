"""HTTP requests handed to custom protocol handlers."""

from __future__ import annotations

import dataclasses
import string
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .errors import InvalidMethodError, WryError
from .headers import HeaderMap, NameLike, ValueLike

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


class Method(str):
    """An HTTP method; case-sensitive, standard ones are class attributes."""

    GET: "Method"
    POST: "Method"
    PUT: "Method"
    DELETE: "Method"
    HEAD: "Method"
    OPTIONS: "Method"
    CONNECT: "Method"
    PATCH: "Method"
    TRACE: "Method"

    def __new__(cls, value: str) -> "Method":
        if not value or any(char not in _TOKEN_CHARS for char in value):
            raise InvalidMethodError("invalid HTTP method")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"Method({str(self)!r})"


Method.GET = Method("GET")
Method.POST = Method("POST")
Method.PUT = Method("PUT")
Method.DELETE = Method("DELETE")
Method.HEAD = Method("HEAD")
Method.OPTIONS = Method("OPTIONS")
Method.CONNECT = Method("CONNECT")
Method.PATCH = Method("PATCH")
Method.TRACE = Method("TRACE")


def parse_method(value: Union[Method, str, bytes, bytearray]) -> Method:
    """Turn *value* into a :class:`Method`, raising InvalidMethodError if malformed."""
    if isinstance(value, Method):
        return value
    if isinstance(value, (bytes, bytearray)):
        try:
            value = bytes(value).decode("ascii")
        except UnicodeDecodeError:
            raise InvalidMethodError("invalid HTTP method") from None
    elif not isinstance(value, str):
        raise TypeError(f"method must be str or bytes, not {type(value).__name__}")
    return Method(value)


@dataclass
class RequestParts:
    """The head of a request: method, URI and headers."""

    method: Method = Method.GET
    uri: str = ""
    headers: HeaderMap = field(default_factory=HeaderMap)


@dataclass
class Request:
    """A request made by the web view: a head and a body."""

    head: RequestParts = field(default_factory=RequestParts)
    body: bytes = b""

    def __post_init__(self) -> None:
        self.body = bytes(self.body)

    @property
    def method(self) -> Method:
        return self.head.method

    @property
    def uri(self) -> str:
        return self.head.uri

    @property
    def headers(self) -> HeaderMap:
        return self.head.headers

    def into_parts(self) -> tuple[RequestParts, bytes]:
        """Split the request into its head and body."""
        return self.head, self.body


class RequestBuilder:
    """Chainable request construction; the first error is raised by :meth:`body`."""

    def __init__(self) -> None:
        self._parts = RequestParts()
        self._error: Optional[WryError] = None

    def _apply(self, change: Callable[[RequestParts], None]) -> "RequestBuilder":
        if self._error is None:
            try:
                change(self._parts)
            except WryError as err:
                self._error = err
        return self

    def method(self, method: Union[Method, str, bytes]) -> "RequestBuilder":
        """Set the method; GET by default."""

        def change(parts: RequestParts) -> None:
            parts.method = parse_method(method)

        return self._apply(change)

    def uri(self, uri: str) -> "RequestBuilder":
        """Set the URI; empty by default."""

        def change(parts: RequestParts) -> None:
            parts.uri = str(uri)

        return self._apply(change)

    def header(self, key: NameLike, value: ValueLike) -> "RequestBuilder":
        """Append a header field."""

        def change(parts: RequestParts) -> None:
            parts.headers.append(key, value)

        return self._apply(change)

    def body(self, body: bytes) -> Request:
        """Build the request with *body*, raising any error recorded earlier."""
        if self._error is not None:
            raise self._error
        head = dataclasses.replace(self._parts, headers=self._parts.headers.copy())
        return Request(head=head, body=bytes(body))