"""
pyupi - call methods on remote or locally-loaded objects with ordinary call syntax.

A proxy built with :func:`upi` turns each attribute access into one more segment
of a call path. Calling the final attribute sends a request carrying the path
and the arguments to a handler, and resolves to the remote result or raises the
remote failure locally.

Key Features:
    - Lazy path proxies: nothing is sent until the call is awaited
    - HTTP transport with per-call correlation ids (``X-UPI-ID``)
    - In-process dispatch against modules or plain object graphs
    - Typed error round trip for a fixed catalog of error kinds
    - A FastAPI router that serves a directory of Python modules

Basic Usage:
    >>> import asyncio
    >>> import pyupi
    >>> async def main():
    ...     api = pyupi.upi("http://localhost:3030/math.py")
    ...     return await api.add(1, 2)
    >>> asyncio.run(main())
"""

from ._internal.error_codec import ErrorKind, decode_error, encode_error
from ._internal.handlers import Handler, LocalHandler, ObjectHandler, RemoteHandler
from ._internal.rpc_protocol import PathProxy, handle, invoke, proxy
from ._internal.rpc_serialization import (
    UNDEFINED,
    UPI_ID_HEADER,
    UPI_USER_AGENT,
    UPIRequest,
    UPIResponse,
    uid,
)
from .client import upi
from .errors import (
    MethodNotAllowedError,
    MissingArgumentError,
    ProtocolViolationError,
    RemoteError,
    ResolutionError,
    TransportError,
    UnknownMethodError,
    UPIError,
)

__version__ = "0.1.0"

__all__ = [
    "upi",
    "proxy",
    "invoke",
    "handle",
    "uid",
    "PathProxy",
    "Handler",
    "ObjectHandler",
    "LocalHandler",
    "RemoteHandler",
    "UPIRequest",
    "UPIResponse",
    "UNDEFINED",
    "UPI_ID_HEADER",
    "UPI_USER_AGENT",
    "ErrorKind",
    "encode_error",
    "decode_error",
    "UPIError",
    "MissingArgumentError",
    "ResolutionError",
    "UnknownMethodError",
    "TransportError",
    "ProtocolViolationError",
    "MethodNotAllowedError",
    "RemoteError",
]
