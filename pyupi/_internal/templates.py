"""Re-export stub generation for GET requests on a module path."""

from __future__ import annotations

from types import ModuleType

from .resolution import ModuleResolvable

_TEMPLATE = '''\
"""Remote proxy for {url} (generated by pyupi)."""

from pyupi import upi

mod = upi({url!r})

{assignments}

__all__ = {names!r}
'''


def module_template(url: str, module: ModuleType) -> str:
    """Return Python source that re-exports *module*'s public names from a remote proxy at *url*."""
    names = [name for name in ModuleResolvable(module).member_names() if name.isidentifier()]
    assignments = "\n".join(f"{name} = mod.{name}" for name in names)
    return _TEMPLATE.format(url=url, assignments=assignments, names=names)
