"""Error codec: typed failures to and from their wire string form.

Wire form::

    <Kind>: <Message>
    <trace line>
    <trace line>

A failure without a message encodes as the bare kind name. Newlines and
backslashes in the message are escaped, so the first line always holds the
whole message. Decoding matches the kind against :class:`ErrorKind`; kinds
outside the catalog come back as :class:`~pyupi.errors.RemoteError` with the
original kind kept in ``name``.
That fallback is lossy: only the name and message survive.
"""

from __future__ import annotations

import re
import traceback
from enum import Enum

from ..errors import (
    EvalError,
    MethodNotAllowedError,
    MissingArgumentError,
    ProtocolViolationError,
    RangeError,
    RemoteError,
    ResolutionError,
    TransportError,
    UnknownMethodError,
    UPIError,
    URIError,
)

_SEPARATOR = ": "
_ESCAPES = {"\\": "\\\\", "\n": "\\n"}
_UNESCAPE = re.compile(r"\\([\\n])")


class ErrorKind(Enum):
    """Fixed catalog of error kinds that survive the wire with their type."""

    # Cross-runtime kinds
    EVAL = ("EvalError", EvalError)
    RANGE = ("RangeError", RangeError)
    REFERENCE = ("ReferenceError", ReferenceError)
    SYNTAX = ("SyntaxError", SyntaxError)
    TYPE = ("TypeError", TypeError)
    URI = ("URIError", URIError)

    # Protocol kinds
    MISSING_ARGUMENT = ("MissingArgument", MissingArgumentError)
    RESOLUTION = ("Resolution", ResolutionError)
    UNKNOWN_METHOD = ("UnknownMethod", UnknownMethodError)
    TRANSPORT = ("Transport", TransportError)
    PROTOCOL_VIOLATION = ("ProtocolViolation", ProtocolViolationError)
    METHOD_NOT_ALLOWED = ("MethodNotAllowed", MethodNotAllowedError)

    # Python built-ins
    VALUE = ("ValueError", ValueError)
    KEY = ("KeyError", KeyError)
    INDEX = ("IndexError", IndexError)
    ATTRIBUTE = ("AttributeError", AttributeError)
    LOOKUP = ("LookupError", LookupError)
    NOT_IMPLEMENTED = ("NotImplementedError", NotImplementedError)
    ZERO_DIVISION = ("ZeroDivisionError", ZeroDivisionError)
    RUNTIME = ("RuntimeError", RuntimeError)
    TIMEOUT = ("TimeoutError", TimeoutError)
    PERMISSION = ("PermissionError", PermissionError)
    FILE_NOT_FOUND = ("FileNotFoundError", FileNotFoundError)

    def __init__(self, wire_name: str, exc_type: type[BaseException]) -> None:
        self.wire_name = wire_name
        self.exc_type = exc_type

    @classmethod
    def from_name(cls, name: str) -> ErrorKind | None:
        """Return the catalog entry for *name*, or None when it is not cataloged."""
        return _BY_NAME.get(name)


_BY_NAME: dict[str, ErrorKind] = {kind.wire_name: kind for kind in ErrorKind}


def error_name(error: BaseException) -> str:
    """Return the wire kind name of *error*."""
    if isinstance(error, RemoteError):
        return error.name
    if isinstance(error, UPIError):
        return error.kind
    return type(error).__name__


def error_message(error: BaseException) -> str:
    """Return the message of *error* without ``str()`` decoration (e.g. KeyError quotes)."""
    if isinstance(error, UPIError):
        return error.message
    if len(error.args) == 1 and isinstance(error.args[0], str):
        return error.args[0]
    if not error.args:
        return ""
    return str(error)


def error_trace(error: BaseException) -> str:
    """Return the diagnostic trace of *error*, preferring one carried from a remote hop."""
    remote_trace = getattr(error, "remote_traceback", None)
    if remote_trace:
        return str(remote_trace)
    if error.__traceback__ is None:
        return ""
    return "".join(traceback.format_tb(error.__traceback__)).rstrip("\n")


def _escape(message: str) -> str:
    return "".join(_ESCAPES.get(char, char) for char in message)


def _unescape(message: str) -> str:
    return _UNESCAPE.sub(lambda match: "\n" if match.group(1) == "n" else "\\", message)


def encode_error(error: BaseException, include_trace: bool = True) -> str:
    """Encode *error* as ``"<Kind>: <Message>"`` followed by its trace lines."""
    name = error_name(error)
    message = error_message(error)
    if not message:
        return name

    head = f"{name}{_SEPARATOR}{_escape(message)}"
    trace = error_trace(error) if include_trace else ""
    return f"{head}\n{trace}" if trace else head


def decode_error(encoded: str) -> BaseException:
    """Rebuild a typed failure from its wire form.

    The message is always set, possibly to an empty string. Decoded failures
    carry ``remote_kind`` and ``remote_traceback`` attributes.
    """
    head, _, trace = encoded.partition("\n")
    name, _, message = head.partition(_SEPARATOR)
    message = _unescape(message)

    kind = ErrorKind.from_name(name)
    error: BaseException
    if kind is None:
        error = RemoteError(message, name=name)
    else:
        error = kind.exc_type(message)

    error.remote_kind = name  # type: ignore[attr-defined]
    error.remote_traceback = trace  # type: ignore[attr-defined]
    return error
