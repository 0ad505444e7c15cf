"""Error taxonomy for pyupi.

Every failure raised by the protocol layer derives from :class:`UPIError` and
carries a ``kind`` string, which is the name used on the wire. Failures raised
by a remote target method are reconstructed by the error codec into either a
catalog exception (built-in or one of the classes below) or a
:class:`RemoteError` that keeps the remote kind name.
"""

from __future__ import annotations

from typing import ClassVar


class UPIError(Exception):
    """Base class for all pyupi protocol failures."""

    kind: ClassVar[str] = "UPIError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class MissingArgumentError(UPIError):
    """An argument was the ``UNDEFINED`` marker; use ``None`` instead."""

    kind = "MissingArgument"


class ResolutionError(UPIError):
    """The target module or location could not be found or loaded."""

    kind = "Resolution"


class UnknownMethodError(UPIError):
    """The request path does not name an invocable member."""

    kind = "UnknownMethod"


class TransportError(UPIError):
    """The transport failed: non-success HTTP status or connection failure."""

    kind = "Transport"

    def __init__(self, message: str = "", status: int | None = None, status_text: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.status_text = status_text


class ProtocolViolationError(UPIError):
    """The response envelope broke the protocol (id mismatch, malformed body)."""

    kind = "ProtocolViolation"


class MethodNotAllowedError(UPIError):
    """The router received an HTTP method it does not serve."""

    kind = "MethodNotAllowed"


class RemoteError(UPIError):
    """A remote failure whose kind is outside the known catalog.

    Only the kind name and message survive the round trip; ``name`` holds the
    original kind.
    """

    kind = "Error"

    def __init__(self, message: str = "", name: str = "Error") -> None:
        super().__init__(message)
        self.name = name

    def __str__(self) -> str:
        return f"{self.name}: {self.message}" if self.message else self.name


# Catalog kinds without a Python built-in counterpart.

class EvalError(RuntimeError):
    """Remote evaluation failure."""


class RangeError(ValueError):
    """Remote value outside its allowed range."""


class URIError(ValueError):
    """Remote URI encoding or decoding failure."""


__all__ = [
    "UPIError",
    "MissingArgumentError",
    "ResolutionError",
    "UnknownMethodError",
    "TransportError",
    "ProtocolViolationError",
    "MethodNotAllowedError",
    "RemoteError",
    "EvalError",
    "RangeError",
    "URIError",
]
