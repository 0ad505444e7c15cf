"""
RPC Protocol & Core Logic.

This module contains:
- PathProxy (caller-side path accumulation and invocation)
- invoke (explicit "call with path segments" primitive)
- handle (receiver-side dispatcher)
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any

from ..errors import MissingArgumentError, UnknownMethodError
from ..interfaces import UPIHandler
from .error_codec import decode_error, encode_error
from .resolution import NOT_FOUND, as_resolvable
from .rpc_serialization import UNDEFINED, UPIRequest, UPIResponse, uid

# ---------------------------------------------------------------------------
# Caller side
# ---------------------------------------------------------------------------


def check_arguments(name: str, args: Sequence[Any]) -> None:
    """Reject the UNDEFINED marker before any request exists."""
    for index, arg in enumerate(args):
        if arg is UNDEFINED:
            raise MissingArgumentError(f"{name}: argument {index} is UNDEFINED, use None instead")


async def invoke(handler: UPIHandler, path: Sequence[str], args: Sequence[Any]) -> Any:
    """Call the member at *path* through *handler* and return its result.

    Raises the decoded remote failure when the response carries an error.
    """
    name = path[-1] if path else ""
    check_arguments(name, args)

    request = UPIRequest(id=uid(), path=list(path), args=list(args))
    response = await handler(request)

    error = response.get("error")
    if error:
        raise decode_error(error)
    return response.get("result")


class PathProxy:
    """Lazily accumulates member accesses into a path; calling it sends the request.

    ``api.math.add(1, 2)`` builds the path ``("math", "add")`` and awaits the
    handler only when the coroutine returned by the call is awaited. Every
    access returns a new proxy, so chains built from a shared root never see
    each other's segments.
    """

    __slots__ = ("_handler", "_path")

    def __init__(self, handler: UPIHandler, path: Sequence[str] = ()) -> None:
        object.__setattr__(self, "_handler", handler)
        object.__setattr__(self, "_path", tuple(path))

    def __getattr__(self, name: str) -> PathProxy:
        if name.startswith("__") and name.endswith("__"):
            raise AttributeError(name)
        return PathProxy(self._handler, (*self._path, name))

    def __getitem__(self, name: str) -> PathProxy:
        if not isinstance(name, str):
            raise TypeError(f"Path segments must be strings, got {type(name).__name__}")
        return PathProxy(self._handler, (*self._path, name))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Setting members through a proxy is not supported")

    def __call__(self, *args: Any) -> Any:
        # Validate eagerly so the failure points at the call site.
        check_arguments(self._path[-1] if self._path else "", args)
        return invoke(self._handler, self._path, args)

    def __repr__(self) -> str:
        return f"<PathProxy {'.'.join(self._path) or '<root>'}>"


def proxy(handler: UPIHandler, path: Sequence[str] = ()) -> Any:
    """Return a root proxy bound to *handler*."""
    return PathProxy(handler, path)


def proxy_path(target: PathProxy) -> tuple[str, ...]:
    """Return the path accumulated by *target*."""
    return object.__getattribute__(target, "_path")


# ---------------------------------------------------------------------------
# Receiver side
# ---------------------------------------------------------------------------


def _failure(request: UPIRequest, error: BaseException) -> UPIResponse:
    return UPIResponse(id=request["id"], path=request["path"], error=encode_error(error))


def _unknown(container_path: Sequence[str], name: str, valid: Sequence[str]) -> UnknownMethodError:
    return UnknownMethodError(
        f'Unknown request "{".".join(container_path)}":{name}. Valid = {",".join(valid)}'
    )


def _resolve(target: Any, path: list[str], name: str) -> Any:
    """Walk *path* from *target* and return the callable called *name* on the container."""
    container = as_resolvable(target)
    for index, segment in enumerate(path):
        member = container.get_member(segment)
        if member is NOT_FOUND or member is None:
            raise _unknown(path[: index + 1], name, container.member_names())
        container = as_resolvable(member)

    func = container.get_member(name) if name else NOT_FOUND
    if func is NOT_FOUND or not callable(func):
        raise _unknown(path, name, container.member_names())
    return func


async def handle(target: Any, request: UPIRequest) -> UPIResponse:
    """Resolve the request path against *target*, invoke it, and wrap the outcome.

    Failures raised while resolving or by the invoked method are encoded into
    ``error``; they never propagate out of this coroutine.
    """
    path = list(request.get("path") or [])
    name = path.pop() if path else ""

    try:
        func = _resolve(target, path, name)
    except UnknownMethodError as exc:
        # Unknown-method envelopes carry no trace.
        return _failure(request, exc.with_traceback(None))
    except Exception as exc:
        return _failure(request, exc)

    try:
        result = func(*request.get("args", []))
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        return _failure(request, exc)

    return UPIResponse(id=request["id"], path=request["path"], result=result)
