import pytest

from wrykit.errors import (
    DuplicateCustomProtocolError,
    InitScriptError,
    InvalidHeaderNameError,
    InvalidHeaderValueError,
    InvalidMethodError,
    InvalidStatusCodeError,
    InvalidUriError,
    MessageSenderError,
    RpcScriptError,
    WryError,
)


def test_init_script_error_message():
    assert str(InitScriptError()) == "Failed to initialize the script"


def test_message_sender_error_message():
    assert str(MessageSenderError()) == "Failed to send the message"


def test_duplicate_protocol_message_and_attribute():
    err = DuplicateCustomProtocolError("wry")
    assert str(err) == "Duplicate custom protocol registered: wry"
    assert err.scheme == "wry"


def test_rpc_script_error_keeps_arguments():
    err = RpcScriptError("open", "[1]")
    assert err.method == "open"
    assert err.params == "[1]"
    assert str(err).startswith("Bad RPC request: open")


@pytest.mark.parametrize(
    "cls, prefix",
    [
        (InvalidHeaderNameError, "Invalid header name: "),
        (InvalidHeaderValueError, "Invalid header value: "),
        (InvalidUriError, "Invalid uri: "),
        (InvalidStatusCodeError, "Invalid status code: "),
        (InvalidMethodError, "Invalid method: "),
    ],
)
def test_invalid_errors_format_detail(cls, prefix):
    err = cls("detail text")
    assert str(err) == prefix + "detail text"
    assert err.detail == "detail text"
    assert isinstance(err, WryError)
    assert isinstance(err, ValueError)


def test_catch_through_base_class():
    err = DuplicateCustomProtocolError("wry.dev")
    assert isinstance(err, WryError)
    assert err.scheme == "wry.dev"
    assert str(err) == "Duplicate custom protocol registered: wry.dev"