"""Case-insensitive multi-valued HTTP header map and header validation."""

from __future__ import annotations

import string
from typing import Iterable, Iterator, Optional, Union

from .errors import InvalidHeaderNameError, InvalidHeaderValueError

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")

NameLike = Union[str, bytes, bytearray]
ValueLike = Union[str, bytes, bytearray, int]


def validate_header_name(name: NameLike) -> str:
    """Check that *name* is an HTTP token and return it in lower case."""
    if isinstance(name, (bytes, bytearray)):
        try:
            name = bytes(name).decode("ascii")
        except UnicodeDecodeError:
            raise InvalidHeaderNameError("invalid HTTP header name") from None
    elif not isinstance(name, str):
        raise TypeError(f"header name must be str or bytes, not {type(name).__name__}")
    if not name or any(char not in _TOKEN_CHARS for char in name):
        raise InvalidHeaderNameError("invalid HTTP header name")
    return name.lower()


def _is_allowed_value_char(char: str) -> bool:
    code = ord(char)
    return code == 0x09 or (code >= 0x20 and code != 0x7F)


def validate_header_value(value: ValueLike) -> str:
    """Check that *value* holds no control characters and return it as text.

    Integers are written in decimal; bytes are read as Latin-1.
    """
    if isinstance(value, bool):
        raise TypeError("header value must not be a bool")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value).decode("latin-1")
    elif isinstance(value, str):
        text = value
    else:
        raise TypeError(f"header value must be str, bytes or int, not {type(value).__name__}")
    if not all(_is_allowed_value_char(char) for char in text):
        raise InvalidHeaderValueError("failed to parse header value")
    return text


def _lookup_key(name: NameLike) -> str:
    if isinstance(name, (bytes, bytearray)):
        return bytes(name).decode("latin-1").lower()
    return name.lower()


class HeaderMap:
    """Ordered header fields; names compare case-insensitively and may repeat."""

    def __init__(self, pairs: Iterable[tuple[NameLike, ValueLike]] = ()) -> None:
        self._entries: list[tuple[str, str]] = []
        for name, value in pairs:
            self.append(name, value)

    def append(self, name: NameLike, value: ValueLike) -> None:
        """Add a field, keeping any existing values for the same name."""
        entry = (validate_header_name(name), validate_header_value(value))
        self._entries.append(entry)

    def get(self, name: NameLike, default: Optional[str] = None) -> Optional[str]:
        """Return the first value stored under *name*, or *default*."""
        key = _lookup_key(name)
        return next((value for field, value in self._entries if field == key), default)

    def get_all(self, name: NameLike) -> list[str]:
        """Return every value stored under *name*, in insertion order."""
        key = _lookup_key(name)
        return [value for field, value in self._entries if field == key]

    def items(self) -> list[tuple[str, str]]:
        """Return all (name, value) pairs in insertion order."""
        return list(self._entries)

    def keys(self) -> list[str]:
        """Return the distinct names in order of first appearance."""
        return list(dict.fromkeys(field for field, _ in self._entries))

    def copy(self) -> "HeaderMap":
        clone = HeaderMap()
        clone._entries = list(self._entries)
        return clone

    def _grouped(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for field, value in self._entries:
            grouped.setdefault(field, []).append(value)
        return grouped

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, bytes, bytearray)):
            return False
        key = _lookup_key(name)
        return any(field == key for field, _ in self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return self._grouped() == other._grouped()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HeaderMap({self._entries!r})"