"""Exception hierarchy for the package."""


class WryError(Exception):
    """Base class of every error raised by the package."""


class InitScriptError(WryError):
    """An initialization script could not be installed."""

    def __init__(self) -> None:
        super().__init__("Failed to initialize the script")


class RpcScriptError(WryError):
    """A malformed RPC request arrived from the page."""

    def __init__(self, method: str, params: str) -> None:
        self.method = method
        self.params = params
        super().__init__(f"Bad RPC request: {method} ((1))")


class MessageSenderError(WryError):
    """A message could not be delivered."""

    def __init__(self) -> None:
        super().__init__("Failed to send the message")


class DuplicateCustomProtocolError(WryError):
    """A custom protocol scheme was registered twice."""

    def __init__(self, scheme: str) -> None:
        self.scheme = scheme
        super().__init__(f"Duplicate custom protocol registered: {scheme}")


class _InvalidValueError(WryError, ValueError):
    """Shared base for errors about a rejected piece of an HTTP message."""

    prefix = "Invalid value"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class InvalidHeaderNameError(_InvalidValueError):
    """A header name contains characters outside the HTTP token set."""

    prefix = "Invalid header name"


class InvalidHeaderValueError(_InvalidValueError):
    """A header value contains control characters."""

    prefix = "Invalid header value"


class InvalidUriError(_InvalidValueError):
    """A URI could not be parsed."""

    prefix = "Invalid uri"


class InvalidStatusCodeError(_InvalidValueError):
    """A status code is outside the range 100 to 999."""

    prefix = "Invalid status code"


class InvalidMethodError(_InvalidValueError):
    """A request method is empty or not an HTTP token."""

    prefix = "Invalid method"