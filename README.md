# wrykit

Building blocks for answering an embedded webview's requests on a custom URL
scheme, plus the command-line tooling used to benchmark webview applications.
It has no dependencies outside the standard library.

## Installation

```
pip install wrykit
```

## HTTP types

`wrykit.request` and `wrykit.response` hold the request and response types
exchanged with a custom protocol handler.

- `Request` has a `head` (`RequestParts`: `method`, `uri`, `headers`) and a
  `body` in bytes; `method`, `uri` and `headers` are also readable on the
  request itself, and `into_parts()` returns `(head, body)`.
- `Response` has a `head` (`ResponseParts`: `status`, `version`, `headers`,
  `mimetype`) and a `body`. Defaults are status 200, `Version.HTTP_11` and no
  mimetype.
- `Method` is a `str` subclass with `Method.GET`, `Method.POST` and the other
  standard methods; `parse_method` accepts `str` or `bytes`.
- `parse_status` accepts an int, or a three-digit string or bytes, in the
  range 100 to 999.

`RequestBuilder` and `ResponseBuilder` collect settings in a chain. A bad
method, status code, header name or header value is remembered and raised
only when `body()` is called, so errors are reported in one place:

```python
from wrykit.response import ResponseBuilder

response = (
    ResponseBuilder()
    .mimetype("text/html")
    .status(202)
    .header("Accept-Ranges", "bytes")
    .body(b"hello!")
)
```

Headers live in a `wrykit.headers.HeaderMap`. `append` keeps every value
given under a name; `get` returns the first value, `get_all` every value, and
names are compared case-insensitively (they are stored in lower case).
`validate_header_name` and `validate_header_value` are the checks it applies.

## Errors

Every error the package raises for a bad HTTP message is a subclass of
`wrykit.errors.WryError` and also of `ValueError`: `InvalidHeaderNameError`,
`InvalidHeaderValueError`, `InvalidUriError`, `InvalidStatusCodeError` and
`InvalidMethodError`. The module also defines `InitScriptError`,
`RpcScriptError`, `MessageSenderError` and `DuplicateCustomProtocolError`.

## Serving files

`wrykit.assets` holds handlers that take a `Request` and return a `Response`:

- `serve_file(request, scheme="wry")` removes `<scheme>://` from the URI
  (`path_from_uri`), reads the whole file and sets the mimetype from
  `guess_mimetype`, which knows `.html`, `.js`, `.png` and `.mp4` and raises
  `ValueError` for anything else. A missing file raises `FileNotFoundError`.
- `serve_stream(request, scheme="wry")` serves `.html` and `.mp4` files and
  honours the first range of a `Range` header with a `206` response carrying
  `Content-Range`, `Content-Length`, `Accept-Ranges` and `Connection`
  headers. A range longer than a third of the file is cut to 400 KiB.
  `parse_range(header, file_size)` is the parser it uses.
- `form_values(request)` splits the body of a POST request on `&`; other
  methods give an empty list.

## Benchmarks

Two commands drive a benchmark suite of prebuilt binaries. They call
external tools (`hyperfine`, `cargo`, `git`, and on Linux `strace` and
`mprof`), which must be on `PATH`. The benchmark directory is taken from the
`WRYKIT_BENCH_ROOT` environment variable, or the working directory; binaries
are expected under `tests/target/<target triple>/release`. Only Linux and
macOS targets are supported.

```
wrykit-run-benchmark
```

measures execution time, binary sizes and dependency counts and, on Linux,
thread counts, syscall counts and peak memory, prints the result and writes
it to `bench.json` in the release directory.

```
wrykit-build-jsons [--current PATH] [--all PATH] [--recent PATH]
```

appends the current result (by default `bench.json`) to the full history (by
default `gh-pages/wry-data.json` in the parent of the benchmark directory)
and writes the 20 most recent results to the recent file (by default
`gh-pages/wry-recent.json`).

The pieces behind these commands live in `wrykit.benchutils` (`BenchResult`,
`parse_strace_output`, `parse_max_mem`, `read_json`, `write_json`, ...),
`wrykit.build_jsons` (`recent_results`, `merge_results`) and
`wrykit.run_benchmark`.

## What it does not do

The package does not open windows or embed a webview, and it registers no
scheme with any browser engine. Its handlers are plain functions from
`Request` to `Response`; connecting them to a webview is up to the caller.
The benchmark commands measure binaries built elsewhere; they do not build
them.