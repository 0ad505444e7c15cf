"""
RPC Serialization Layer & Data Structures.

This module contains:
1. Protocol constants (header names, user agent, media types)
2. Data Structures: UPIRequest / UPIResponse TypedDicts, the UNDEFINED marker
3. Envelope helpers: uid, request_from_body, response_from_body
"""

from __future__ import annotations

import random
from typing import Any, TypedDict

from ..errors import ProtocolViolationError

# ---------------------------------------------------------------------------
# Protocol constants
# ---------------------------------------------------------------------------

UPI_ID_HEADER = "X-UPI-ID"
UPI_USER_AGENT = "UPI/1.0"
UPI_CONTENT_TYPE = "application/json"

RAW_SOURCE_SUFFIX = ".mod.py"
PYTHON_SOURCE_CONTENT_TYPE = "text/x-python; charset=utf-8"

_UID_LIMIT = 999_999_999_999_999
_UID_WIDTH = 15

# ---------------------------------------------------------------------------
# Data Structures
# ---------------------------------------------------------------------------


class _Undefined:
    """The explicit "absent value" marker. Never valid as a call argument."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED: Any = _Undefined()


class UPIRequest(TypedDict):
    id: str
    path: list[str]
    args: list[Any]


class _UPIResponseBase(TypedDict):
    id: str
    path: list[str]


class UPIResponse(_UPIResponseBase, total=False):
    result: Any
    error: str


# ---------------------------------------------------------------------------
# Envelope helpers
# ---------------------------------------------------------------------------


def uid() -> str:
    """Return a fresh correlation id: a zero-padded 15-digit random number."""
    return str(random.randrange(0, _UID_LIMIT)).zfill(_UID_WIDTH)


def request_from_body(body: Any, request_id: str) -> UPIRequest:
    """Build a request from a decoded POST body ``{path, args}`` and a header id.

    Raises:
        ProtocolViolationError: If the body is not an object, ``path`` is not a
            list of strings, or ``args`` is not a list.
    """
    if not isinstance(body, dict):
        raise ProtocolViolationError(f"Request body must be a JSON object, got {type(body).__name__}")

    path = body.get("path")
    if not isinstance(path, list) or not all(isinstance(segment, str) for segment in path):
        raise ProtocolViolationError(f"Request path must be a list of strings, got {path!r}")

    args = body.get("args", [])
    if not isinstance(args, list):
        raise ProtocolViolationError(f"Request args must be a list, got {type(args).__name__}")

    return UPIRequest(id=request_id, path=path, args=args)


def response_from_body(body: Any, request: UPIRequest) -> UPIResponse:
    """Validate a decoded response body and return it as a :class:`UPIResponse`."""
    if not isinstance(body, dict):
        raise ProtocolViolationError(
            f"Invalid response body for request {request['id']}: expected a JSON object, "
            f"got {type(body).__name__}"
        )
    error = body.get("error")
    if error is not None and not isinstance(error, str):
        raise ProtocolViolationError(
            f"Invalid response body for request {request['id']}: error must be a string"
        )
    return UPIResponse(**body)  # type: ignore[typeddict-item]
