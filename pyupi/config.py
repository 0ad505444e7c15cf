from __future__ import annotations

import logging
import os
from typing import Any, TypedDict

from .interfaces import ReadDir, ReadFile

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3030
DEFAULT_HOST = "127.0.0.1"


class ServeOptions(TypedDict):
    """Configuration for :func:`pyupi.server.serve`."""

    port: int
    """TCP port the listener binds to."""

    api_dir: str
    """Base resolution root; URL paths are resolved to modules inside it."""

    host: str
    """Interface the listener binds to."""


class HandlerContext(TypedDict, total=False):
    """Pluggable file capabilities used by the request router."""

    read_file: ReadFile
    """Returns the raw bytes (or a byte stream) of a source file."""

    read_dir: ReadDir
    """Returns the file names inside a directory."""


def _env_port(value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"UPI_PORT must be an integer, got {value!r}") from exc


def load_serve_options(**overrides: Any) -> ServeOptions:
    """Build :class:`ServeOptions` from explicit overrides, then ``UPI_*`` env vars, then defaults.

    Overrides set to None are ignored.
    """
    given = {key: value for key, value in overrides.items() if value is not None}
    unknown = set(given) - set(ServeOptions.__annotations__)
    if unknown:
        raise ValueError(f"Unknown serve options: {sorted(unknown)}")

    env_port = os.environ.get("UPI_PORT")
    port = given.get("port", _env_port(env_port) if env_port else DEFAULT_PORT)
    options = ServeOptions(
        port=int(port),
        api_dir=str(given.get("api_dir", os.environ.get("UPI_API_DIR", os.getcwd()))),
        host=str(given.get("host", os.environ.get("UPI_HOST", DEFAULT_HOST))),
    )
    logger.debug("Resolved serve options: %s", options)
    return options
