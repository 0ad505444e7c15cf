"""
Handler variants.

This module contains:
- Handler (base class)
- ObjectHandler (dispatch against an in-process object graph)
- LocalHandler (dispatch against a module loaded from a file location)
- RemoteHandler (HTTP POST to a pyupi endpoint via httpx)
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
from typing_extensions import override

from ..errors import ProtocolViolationError, TransportError
from .loader import load_module
from .rpc_protocol import handle
from .rpc_serialization import (
    UPI_CONTENT_TYPE,
    UPI_ID_HEADER,
    UPI_USER_AGENT,
    UPIRequest,
    UPIResponse,
    response_from_body,
)

logger = logging.getLogger(__name__)


class Handler:
    """Base class for request handlers; an async callable from request to response."""

    async def __call__(self, request: UPIRequest) -> UPIResponse:
        raise NotImplementedError


class ObjectHandler(Handler):
    """Dispatches requests against an object graph living in this process."""

    def __init__(self, target: Any) -> None:
        self.target = target

    @override
    async def __call__(self, request: UPIRequest) -> UPIResponse:
        return await handle(self.target, request)

    def __repr__(self) -> str:
        return f"<ObjectHandler target={type(self.target).__name__}>"


class LocalHandler(Handler):
    """Resolves a module from a file location on every call and dispatches into it.

    Resolution failures raise :class:`~pyupi.errors.ResolutionError`; failures
    of the invoked method come back as error responses.
    """

    def __init__(self, location: str | os.PathLike[str]) -> None:
        self.location = location

    @override
    async def __call__(self, request: UPIRequest) -> UPIResponse:
        module = load_module(self.location)
        return await handle(module, request)

    def __repr__(self) -> str:
        return f"<LocalHandler location={os.fspath(self.location)!r}>"


class RemoteHandler(Handler):
    """Sends requests as JSON POSTs to a pyupi endpoint.

    Args:
        url: Endpoint the requests are posted to.
        transport: Optional httpx transport (e.g. ``ASGITransport`` for in-process apps).
        timeout: Per-request timeout in seconds; None waits indefinitely.
        headers: Extra headers sent with every request. Protocol headers win.
    """

    def __init__(
        self,
        url: str | httpx.URL,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.url = httpx.URL(str(url))
        self.transport = transport
        self.timeout = timeout
        self.headers = dict(headers or {})

    def _request_headers(self, request: UPIRequest) -> dict[str, str]:
        headers = dict(self.headers)
        headers.update({
            "User-Agent": UPI_USER_AGENT,
            "Content-Type": UPI_CONTENT_TYPE,
            UPI_ID_HEADER: request["id"],
        })
        return headers

    @override
    async def __call__(self, request: UPIRequest) -> UPIResponse:
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.post(
                    self.url,
                    json={"path": request["path"], "args": request["args"]},
                    headers=self._request_headers(request),
                )
            except httpx.HTTPError as exc:
                logger.warning("[UPI][Remote] POST %s failed: %s", self.url, exc)
                raise TransportError(f"Failed to fetch {self.url}: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "[UPI][Remote] POST %s answered %s %s", self.url, response.status_code, response.reason_phrase
            )
            raise TransportError(
                f"Failed to fetch: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
                status_text=response.reason_phrase,
            )

        response_id = response.headers.get(UPI_ID_HEADER)
        if response_id != request["id"]:
            raise ProtocolViolationError(
                f"Invalid response: {response.status_code} {{ req={request['id']}, res={response_id} }}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ProtocolViolationError(f"Invalid response body for request {request['id']}: {exc}") from exc

        return response_from_body(body, request)

    def __repr__(self) -> str:
        return f"<RemoteHandler url={str(self.url)!r}>"
