"""Server-side entry points: the ASGI app and the uvicorn listener."""

from __future__ import annotations

import logging
import os

import uvicorn
from fastapi import FastAPI

from ._internal.router import RequestRouter, create_request_handler
from .config import HandlerContext, ServeOptions, load_serve_options

__all__ = ["RequestRouter", "create_app", "create_request_handler", "serve"]

logger = logging.getLogger(__name__)

ROUTER_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(api_dir: str | os.PathLike[str], context: HandlerContext | None = None) -> FastAPI:
    """Build a FastAPI app routing every path under *api_dir* through one :class:`RequestRouter`."""
    router = RequestRouter(api_dir, context)
    app = FastAPI(title="pyupi", docs_url=None, redoc_url=None, openapi_url=None)
    app.add_route("/{path:path}", router.handle_http, methods=ROUTER_METHODS, include_in_schema=False)
    app.state.upi_router = router
    return app


async def serve(options: ServeOptions | None = None, context: HandlerContext | None = None) -> None:
    """Serve ``options["api_dir"]`` until the listener is stopped."""
    options = options or load_serve_options()
    app = create_app(options["api_dir"], context)
    config = uvicorn.Config(app, host=options["host"], port=options["port"], log_level="info")
    server = uvicorn.Server(config)
    logger.info(
        "(upi) serving: api_dir=%s endpoint=http://%s:%s", options["api_dir"], options["host"], options["port"]
    )
    await server.serve()
