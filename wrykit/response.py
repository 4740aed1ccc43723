"""HTTP responses returned by custom protocol handlers."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .errors import InvalidStatusCodeError, WryError
from .headers import HeaderMap, NameLike, ValueLike

_DIGITS = frozenset("0123456789")


class Version(enum.Enum):
    """HTTP protocol version."""

    HTTP_09 = "HTTP/0.9"
    HTTP_10 = "HTTP/1.0"
    HTTP_11 = "HTTP/1.1"
    HTTP_2 = "HTTP/2.0"
    HTTP_3 = "HTTP/3.0"

    def __str__(self) -> str:
        return self.value


def parse_status(status: Union[int, str, bytes, bytearray]) -> int:
    """Return *status* as an int in 100..999, raising InvalidStatusCodeError otherwise."""
    if isinstance(status, bool):
        raise TypeError("status code must not be a bool")
    if isinstance(status, (bytes, bytearray)):
        status = bytes(status).decode("latin-1")
    if isinstance(status, str):
        if len(status) != 3 or not all(char in _DIGITS for char in status):
            raise InvalidStatusCodeError("invalid status code")
        code = int(status)
    elif isinstance(status, int):
        code = int(status)
    else:
        raise TypeError(f"status code must be int, str or bytes, not {type(status).__name__}")
    if not 100 <= code <= 999:
        raise InvalidStatusCodeError("invalid status code")
    return code


@dataclass
class ResponseParts:
    """The head of a response: status, version, headers and mimetype."""

    status: int = 200
    version: Version = Version.HTTP_11
    headers: HeaderMap = field(default_factory=HeaderMap)
    mimetype: Optional[str] = field(default=None, repr=False)


@dataclass
class Response:
    """A response for the web view: a head and a body."""

    head: ResponseParts = field(default_factory=ResponseParts)
    body: bytes = b""

    def __post_init__(self) -> None:
        self.body = bytes(self.body)

    @property
    def status(self) -> int:
        return self.head.status

    @property
    def mimetype(self) -> Optional[str]:
        return self.head.mimetype

    @property
    def version(self) -> Version:
        return self.head.version

    @property
    def headers(self) -> HeaderMap:
        return self.head.headers


class ResponseBuilder:
    """Chainable response construction; the first error is raised by :meth:`body`."""

    def __init__(self) -> None:
        self._parts = ResponseParts()
        self._error: Optional[WryError] = None

    def _apply(self, change: Callable[[ResponseParts], None]) -> "ResponseBuilder":
        if self._error is None:
            try:
                change(self._parts)
            except WryError as err:
                self._error = err
        return self

    def mimetype(self, mimetype: str) -> "ResponseBuilder":
        """Set the mimetype of the body."""

        def change(parts: ResponseParts) -> None:
            parts.mimetype = str(mimetype)

        return self._apply(change)

    def status(self, status: Union[int, str, bytes]) -> "ResponseBuilder":
        """Set the status code; 200 by default."""

        def change(parts: ResponseParts) -> None:
            parts.status = parse_status(status)

        return self._apply(change)

    def version(self, version: Union[Version, str]) -> "ResponseBuilder":
        """Set the HTTP version; HTTP/1.1 by default."""

        def change(parts: ResponseParts) -> None:
            parts.version = Version(version)

        return self._apply(change)

    def header(self, key: NameLike, value: ValueLike) -> "ResponseBuilder":
        """Append a header field."""

        def change(parts: ResponseParts) -> None:
            parts.headers.append(key, value)

        return self._apply(change)

    def body(self, body: bytes) -> Response:
        """Build the response with *body*, raising any error recorded earlier."""
        if self._error is not None:
            raise self._error
        head = dataclasses.replace(self._parts, headers=self._parts.headers.copy())
        return Response(head=head, body=bytes(body))