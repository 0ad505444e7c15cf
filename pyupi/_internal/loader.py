"""Module loading for local targets and the request router.

A location is a Python source file, a package directory containing
``__init__.py``, or a path given without its ``.py`` suffix. Loaded modules are
cached in ``sys.modules`` under a name derived from their absolute path, so a
module body runs once per process and keeps its state between calls. The
directory holding a module (the parent of a package) is added to ``sys.path``
before its body runs, so served modules import their siblings by name.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import os
import sys
from pathlib import Path
from types import ModuleType

from ..errors import ResolutionError

logger = logging.getLogger(__name__)


def resolve_module_file(location: str | os.PathLike[str]) -> Path:
    """Return the source file backing *location*.

    Raises:
        ResolutionError: If no source file exists for the location.
    """
    path = Path(location).expanduser()
    candidates = [path]
    if path.suffix != ".py":
        candidates.append(path.with_name(path.name + ".py"))
    candidates.append(path / "__init__.py")

    for candidate in candidates:
        if candidate.is_file():
            return candidate.resolve()
    raise ResolutionError(f"Module not found: {location}")


def module_name_for(source: Path) -> str:
    digest = hashlib.sha1(str(source).encode("utf-8")).hexdigest()[:12]
    stem = source.parent.name if source.name == "__init__.py" else source.stem
    stem = stem.replace("-", "_").replace(".", "_")
    return f"pyupi_target_{stem}_{digest}"


def import_root_for(source: Path) -> Path:
    """Return the directory whose modules a served module imports as siblings."""
    return source.parent.parent if source.name == "__init__.py" else source.parent


def _add_import_root(root: Path) -> None:
    entry = str(root)
    if entry not in sys.path:
        sys.path.insert(0, entry)
        logger.debug("[UPI][Loader] Added %s to sys.path", entry)


def load_module(location: str | os.PathLike[str]) -> ModuleType:
    """Load (or fetch from cache) the module at *location*.

    Raises:
        ResolutionError: If the location does not exist or its body fails to execute.
    """
    source = resolve_module_file(location)
    sys_module_name = module_name_for(source)

    cached = sys.modules.get(sys_module_name)
    if cached is not None:
        return cached

    module_spec = importlib.util.spec_from_file_location(sys_module_name, source)
    if module_spec is None or module_spec.loader is None:
        raise ResolutionError(f"Cannot load module: {location}")

    _add_import_root(import_root_for(source))
    module = importlib.util.module_from_spec(module_spec)
    sys.modules[sys_module_name] = module
    try:
        module_spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(sys_module_name, None)
        raise ResolutionError(f"Failed to load module {location}: {exc}") from exc
    except BaseException:
        sys.modules.pop(sys_module_name, None)
        raise

    logger.debug("[UPI][Loader] Loaded %s as %s", source, sys_module_name)
    return module


def resolve_within(root: str | os.PathLike[str], relative: str) -> Path:
    """Join a URL path onto *root*, refusing paths that escape it."""
    base = Path(root).resolve()
    candidate = (base / relative.lstrip("/")).resolve()
    if candidate != base and base not in candidate.parents:
        raise ResolutionError(f"Path escapes the API directory: {relative}")
    return candidate
