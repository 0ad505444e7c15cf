"""Tests for the error codec wire form and its typed round trip."""

import pytest

from pyupi._internal.error_codec import ErrorKind, decode_error, encode_error, error_message
from pyupi.errors import (
    RangeError,
    RemoteError,
    TransportError,
    UnknownMethodError,
    URIError,
)


def _raised(exc):
    try:
        raise exc
    except Exception as caught:
        return caught


class TestEncodeError:
    """Tests for encode_error."""

    def test_header_is_kind_and_message(self):
        """First line is ``Kind: Message``."""
        encoded = encode_error(ValueError("bad value"))
        assert encoded == "ValueError: bad value"

    def test_empty_message_encodes_bare_kind(self):
        """A failure without a message encodes as its kind name only."""
        assert encode_error(ValueError()) == "ValueError"
        assert encode_error(TypeError("")) == "TypeError"

    def test_newlines_in_message_are_escaped(self):
        """The header stays on one line."""
        assert encode_error(ValueError("a\nb")) == "ValueError: a\\nb"

    def test_trace_follows_header(self):
        """A raised failure carries its traceback as trailing lines."""
        encoded = encode_error(_raised(RuntimeError("boom")))
        head, _, trace = encoded.partition("\n")

        assert head == "RuntimeError: boom"
        assert "_raised" in trace

    def test_trace_can_be_omitted(self):
        """include_trace=False keeps only the header."""
        encoded = encode_error(_raised(RuntimeError("boom")), include_trace=False)
        assert encoded == "RuntimeError: boom"

    def test_upi_errors_use_protocol_kind(self):
        """UPIError subclasses encode with their protocol kind, not the class name."""
        assert encode_error(UnknownMethodError("nope")) == "UnknownMethod: nope"

    def test_remote_error_keeps_original_name(self):
        """A RemoteError re-encodes under the kind it was decoded from."""
        assert encode_error(RemoteError("oops", name="CustomError")) == "CustomError: oops"

    def test_key_error_message_is_not_quoted(self):
        """KeyError messages are taken from args, not from the quoted str()."""
        assert error_message(KeyError("missing")) == "missing"


class TestDecodeError:
    """Tests for decode_error."""

    @pytest.mark.parametrize("kind", list(ErrorKind))
    def test_catalog_kinds_are_preserved(self, kind):
        """Every cataloged kind decodes to its own exception type with the message intact."""
        error = decode_error(f"{kind.wire_name}: something failed")

        assert type(error) is kind.exc_type
        assert error.args[0] == "something failed"
        assert error.remote_kind == kind.wire_name

    def test_cross_runtime_kinds(self):
        """Range, URI and syntax errors map onto Python types."""
        assert isinstance(decode_error("RangeError: too big"), RangeError)
        assert isinstance(decode_error("RangeError: too big"), ValueError)
        assert isinstance(decode_error("URIError: bad escape"), URIError)
        assert isinstance(decode_error("SyntaxError: unexpected token"), SyntaxError)

    def test_unknown_kind_falls_back_to_remote_error(self):
        """Kinds outside the catalog keep only their name and message."""
        error = decode_error("CustomError: it broke")

        assert isinstance(error, RemoteError)
        assert error.name == "CustomError"
        assert error.message == "it broke"
        assert str(error) == "CustomError: it broke"

    def test_message_split_at_first_separator(self):
        """Only the first ``": "`` separates kind from message."""
        error = decode_error("ValueError: key: value: more")
        assert error.args[0] == "key: value: more"

    def test_bare_kind_sets_empty_message(self):
        """A bare kind decodes with an explicit empty message."""
        error = decode_error("TypeError")

        assert isinstance(error, TypeError)
        assert error.args == ("",)

    def test_trailer_becomes_remote_traceback(self):
        """Lines after the header are attached as the remote trace."""
        error = decode_error("ValueError: bad\n  File \"x.py\", line 1\n    boom()")

        assert error.remote_traceback == '  File "x.py", line 1\n    boom()'

    def test_no_trailer_gives_empty_trace(self):
        """A single-line envelope has an empty remote trace."""
        assert decode_error("ValueError: bad").remote_traceback == ""

    def test_transport_error_decodes_without_status(self):
        """Protocol kinds decode to their classes even without transport metadata."""
        error = decode_error("Transport: Failed to fetch: 502 Bad Gateway")

        assert isinstance(error, TransportError)
        assert error.status is None
        assert error.message == "Failed to fetch: 502 Bad Gateway"


class TestRoundTrip:
    """Encode followed by decode."""

    def test_message_survives_verbatim(self):
        """The message of a cataloged failure comes back unchanged."""
        error = decode_error(encode_error(_raised(ZeroDivisionError("division by zero"))))

        assert isinstance(error, ZeroDivisionError)
        assert error.args[0] == "division by zero"

    def test_remote_trace_is_forwarded_on_reencode(self):
        """A decoded failure re-encodes with the trace it arrived with."""
        first = decode_error("ValueError: bad\nremote line")
        assert encode_error(first) == "ValueError: bad\nremote line"

    def test_multiline_message_survives_verbatim(self):
        """Newlines inside the message stay in the message, not in the trace."""
        error = decode_error(encode_error(_raised(ValueError("line one\nline two"))))

        assert error.args[0] == "line one\nline two"
        assert "line two" not in error.remote_traceback

    def test_backslashes_survive_verbatim(self):
        """Literal backslashes, including a backslash before ``n``, are kept."""
        message = "C:\\new\\dir and \\\\ twice"
        encoded = encode_error(ValueError(message))

        assert "\n" not in encoded
        assert decode_error(encoded).args[0] == message
