"""Default file capabilities for the request router."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path

from ..errors import ResolutionError

CHUNK_SIZE = 64 * 1024


async def _stream(path: Path) -> AsyncIterator[bytes]:
    with path.open("rb") as handle:
        while True:
            chunk = await asyncio.to_thread(handle.read, CHUNK_SIZE)
            if not chunk:
                break
            yield chunk


async def read_file(path: str) -> AsyncIterator[bytes]:
    """Return an async iterator over the bytes of *path*.

    Raises:
        ResolutionError: If the file does not exist.
    """
    file_path = Path(path.removeprefix("file://"))
    if not file_path.is_file():
        raise ResolutionError(f"Module not found: {path}")
    return _stream(file_path)


async def read_dir(path: str) -> list[str]:
    """Return the sorted names of the regular files directly inside *path*."""
    dir_path = Path(path)
    if not dir_path.is_dir():
        raise ResolutionError(f"Directory not found: {path}")
    return sorted(entry.name for entry in dir_path.iterdir() if entry.is_file())
