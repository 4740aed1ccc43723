"""Custom protocol handlers that serve local files to the web view."""

from __future__ import annotations

from pathlib import Path

from .request import Method, Request
from .response import Response, ResponseBuilder

DEFAULT_SCHEME = "wry"

# Largest chunk sent for one oversized range request.
MAX_CHUNK = 1024 * 400

_MIMETYPES = (
    (".html", "text/html"),
    (".js", "text/javascript"),
    (".png", "image/png"),
    (".mp4", "video/mp4"),
)

_STREAM_MIMETYPES = (
    (".html", "text/html"),
    (".mp4", "video/mp4"),
)


def _mimetype_from(path: str, table: tuple[tuple[str, str], ...]) -> str:
    for suffix, mimetype in table:
        if path.endswith(suffix):
            return mimetype
    raise ValueError(f"no mimetype known for {path!r}")


def guess_mimetype(path: str) -> str:
    """Return the mimetype for *path* from its extension; unknown ones raise ValueError."""
    return _mimetype_from(path, _MIMETYPES)


def path_from_uri(uri: str, scheme: str = DEFAULT_SCHEME) -> str:
    """Strip every ``<scheme>://`` from *uri*, leaving the file path."""
    return uri.replace(f"{scheme}://", "")


def _parse_number(text: str, header: str) -> int:
    if not text or not text.isascii() or not text.isdigit():
        raise ValueError(f"invalid range header {header!r}")
    return int(text)


def parse_range(header: str, file_size: int) -> list[tuple[int, int]]:
    """Parse an HTTP ``Range`` header into (start, length) pairs within *file_size*.

    Ranges starting past the end are dropped; if every range was dropped a
    ValueError is raised, as for any malformed header.
    """
    if header == "":
        return []
    prefix = "bytes="
    if not header.startswith(prefix):
        raise ValueError(f"invalid range header {header!r}")

    ranges: list[tuple[int, int]] = []
    no_overlap = False
    for spec in header[len(prefix):].split(","):
        spec = spec.strip()
        if not spec:
            continue
        if "-" not in spec:
            raise ValueError(f"invalid range header {header!r}")
        start_text, end_text = (part.strip() for part in spec.split("-", 1))
        if not start_text:
            suffix = min(_parse_number(end_text, header), file_size)
            start = file_size - suffix
            ranges.append((start, file_size - start))
            continue
        start = _parse_number(start_text, header)
        if start >= file_size:
            no_overlap = True
            continue
        if not end_text:
            length = file_size - start
        else:
            end = _parse_number(end_text, header)
            if start > end:
                raise ValueError(f"invalid range header {header!r}")
            end = min(end, file_size - 1)
            length = end - start + 1
        ranges.append((start, length))

    if no_overlap and not ranges:
        raise ValueError(f"range {header!r} lies outside {file_size} bytes")
    return ranges


def _resolve(request: Request, scheme: str) -> tuple[str, Path]:
    path = path_from_uri(request.uri, scheme)
    return path, Path(path).resolve(strict=True)


def serve_file(request: Request, scheme: str = DEFAULT_SCHEME) -> Response:
    """Answer *request* with the whole file its URI names."""
    path, resolved = _resolve(request, scheme)
    content = resolved.read_bytes()
    return ResponseBuilder().mimetype(guess_mimetype(path)).body(content)


def serve_stream(request: Request, scheme: str = DEFAULT_SCHEME) -> Response:
    """Answer *request* with the named file, honouring the first range of a Range header."""
    path, resolved = _resolve(request, scheme)
    with open(resolved, "rb") as content:
        mimetype = _mimetype_from(path, _STREAM_MIMETYPES)
        builder = ResponseBuilder()
        status = 200

        range_header = request.headers.get("range")
        if range_header is None:
            data = content.read()
        else:
            file_size = resolved.stat().st_size
            ranges = parse_range(range_header, file_size)
            if not ranges:
                data = content.read()
            else:
                start, length = ranges[0]
                real_length = length
                if length > file_size // 3:
                    real_length = MAX_CHUNK
                last_byte = start + real_length - 1
                status = 206
                builder = (
                    builder.header("Connection", "Keep-Alive")
                    .header("Accept-Ranges", "bytes")
                    .header("Content-Length", real_length)
                    .header("Content-Range", f"bytes {start}-{last_byte}/{file_size}")
                )
                content.seek(start)
                data = content.read(real_length)

    return builder.mimetype(mimetype).status(status).body(data)


def form_values(request: Request) -> list[str]:
    """Return the ``&``-separated fields of a POST body; other methods give none."""
    if request.method != Method.POST:
        return []
    return request.body.decode("utf-8", errors="replace").split("&")