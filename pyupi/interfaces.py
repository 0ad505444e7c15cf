"""Public capability protocols for pyupi.

These interfaces define the seams between the protocol core and its
collaborators: handlers that turn a request into a response, object graphs
that the dispatcher can resolve members on, and the file capabilities the
request router reads sources and listings through. They enable structural
typing so collaborators can be implemented without inheriting from concrete
base classes.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Awaitable
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from ._internal.rpc_serialization import UPIRequest, UPIResponse


@runtime_checkable
class UPIHandler(Protocol):
    """Translates a request into a response, in-process or over a transport."""

    async def __call__(self, request: UPIRequest) -> UPIResponse:
        """Deliver *request* and return the matching response."""
        ...


@runtime_checkable
class Resolvable(Protocol):
    """A node of a target object graph that the dispatcher can descend into."""

    def get_member(self, name: str) -> Any:
        """Return the member called *name*, or ``NOT_FOUND``."""
        ...

    def member_names(self) -> list[str]:
        """Return the names a caller may address on this node."""
        ...


FileBody = Union[bytes, str, AsyncIterable[bytes]]


class ReadFile(Protocol):
    """Capability returning the contents of a source file."""

    def __call__(self, path: str) -> Awaitable[FileBody]:
        ...


class ReadDir(Protocol):
    """Capability listing the file names inside a directory."""

    def __call__(self, path: str) -> Awaitable[list[str]]:
        ...
