"""Caller-side entry point: build a proxy from a target URL."""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote, urlsplit

from ._internal.handlers import LocalHandler, RemoteHandler
from ._internal.rpc_protocol import proxy

__all__ = ["upi", "file_url_to_path"]


def file_url_to_path(url: str) -> str:
    """Return the filesystem path of a ``file:`` URL.

    ``file:///abs/mod.py`` is absolute; ``file://./mod.py`` is relative to the
    working directory.
    """
    parts = urlsplit(url)
    if parts.netloc in ("", "localhost"):
        return unquote(parts.path)
    return unquote(parts.netloc + parts.path)


def upi(url: str, **options: Any) -> Any:
    """Create a proxy for *url* based on its protocol.

    Supported protocols:
    - ``http:`` / ``https:``: calls are POSTed through a :class:`RemoteHandler`;
      *options* are passed to it (``transport``, ``timeout``, ``headers``).
    - ``file:``: calls are dispatched into the module at that path through a
      :class:`LocalHandler`.

    Raises:
        ValueError: If the protocol is unsupported.

    Example::

        api = upi("http://localhost:3030/math.py")
        total = await api.add(1, 2)
    """
    scheme = urlsplit(str(url)).scheme
    if scheme in ("http", "https"):
        return proxy(RemoteHandler(url, **options))
    if scheme == "file":
        return proxy(LocalHandler(file_url_to_path(str(url))))
    raise ValueError(f"Unsupported protocol: {scheme}:")
