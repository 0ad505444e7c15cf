"""HTTP-facing request router.

POST dispatches a ``{path, args}`` body into the module addressed by the URL
path. GET serves a generated re-export stub, a directory listing (paths ending
in ``/``), or raw source (paths ending in ``RAW_SOURCE_SUFFIX``). Every other
method is answered with 405.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import AsyncIterable
from typing import Any, Callable, Coroutine

from fastapi import Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from ..config import HandlerContext
from ..errors import MethodNotAllowedError, UPIError
from . import fs
from .error_codec import encode_error
from .loader import load_module, resolve_within
from .rpc_protocol import handle
from .rpc_serialization import (
    PYTHON_SOURCE_CONTENT_TYPE,
    RAW_SOURCE_SUFFIX,
    UPI_CONTENT_TYPE,
    UPI_ID_HEADER,
    request_from_body,
)
from .templates import module_template

logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED_STATUS = 405
SERVER_ERROR_STATUS = 500


class RequestRouter:
    """Serves the modules found under *api_dir* over HTTP."""

    def __init__(self, api_dir: str | os.PathLike[str], context: HandlerContext | None = None) -> None:
        self.api_dir = os.fspath(api_dir)
        context = context or {}
        self.read_file = context.get("read_file", fs.read_file)
        self.read_dir = context.get("read_dir", fs.read_dir)

    def mod_path(self, url_path: str) -> str:
        return self.api_dir.rstrip("/") + url_path

    async def handle_http(self, request: Request) -> Response:
        url_path = request.url.path
        logger.debug("[UPI][Router] %s %s", request.method, url_path)

        if request.method == "POST":
            return await self._post(request, url_path)
        if request.method in ("GET", "HEAD"):
            return await self._get(request, url_path)

        error = MethodNotAllowedError(f"Method not allowed: {request.method}")
        return JSONResponse({"error": encode_error(error)}, status_code=METHOD_NOT_ALLOWED_STATUS)

    def _failure(self, exc: Exception, url_path: str) -> Response:
        logger.error("[UPI][Router] %s failed: %s", url_path, exc, exc_info=not isinstance(exc, UPIError))
        return JSONResponse(
            {"error": encode_error(exc, include_trace=False), "modPath": self.mod_path(url_path)},
            status_code=SERVER_ERROR_STATUS,
        )

    async def _post(self, request: Request, url_path: str) -> Response:
        request_id = request.headers.get(UPI_ID_HEADER, "")
        try:
            body = json.loads(await request.body())
            upi_request = request_from_body(body, request_id)
            module = load_module(resolve_within(self.api_dir, url_path))
            upi_response = await handle(module, upi_request)
            content = json.dumps(upi_response)
        except Exception as exc:
            return self._failure(exc, url_path)

        return Response(
            content,
            status_code=200,
            media_type=UPI_CONTENT_TYPE,
            headers={UPI_ID_HEADER: request_id},
        )

    async def _get(self, request: Request, url_path: str) -> Response:
        try:
            if url_path.endswith("/"):
                return await self._listing(url_path)
            if url_path.endswith(RAW_SOURCE_SUFFIX):
                return await self._raw_source(url_path)

            module = load_module(resolve_within(self.api_dir, url_path))
            stub_url = str(request.url.replace(query="", fragment=""))
            return Response(module_template(stub_url, module), media_type=PYTHON_SOURCE_CONTENT_TYPE)
        except Exception as exc:
            return self._failure(exc, url_path)

    async def _listing(self, url_path: str) -> Response:
        mod_path = self.mod_path(url_path)
        directory = resolve_within(self.api_dir, url_path)
        files = [mod_path + name for name in await self.read_dir(str(directory))]
        return JSONResponse({"modPath": mod_path, "files": files, "basePath": self.api_dir})

    async def _raw_source(self, url_path: str) -> Response:
        source_path = url_path[: -len(RAW_SOURCE_SUFFIX)] + ".py"
        body: Any = await self.read_file(str(resolve_within(self.api_dir, source_path)))
        if isinstance(body, AsyncIterable):
            return StreamingResponse(body, media_type=PYTHON_SOURCE_CONTENT_TYPE)
        return Response(body, media_type=PYTHON_SOURCE_CONTENT_TYPE)


def create_request_handler(
    api_dir: str | os.PathLike[str], context: HandlerContext | None = None
) -> Callable[[Request], Coroutine[Any, Any, Response]]:
    """Return the ``handle_http`` coroutine function of a new router."""
    return RequestRouter(api_dir, context).handle_http
