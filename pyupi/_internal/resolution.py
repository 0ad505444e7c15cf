"""Member resolution over arbitrary object graphs.

The dispatcher never walks objects reflectively by itself; it wraps each node in
a :class:`~pyupi.interfaces.Resolvable` and asks it for members by name. Names
starting with an underscore never resolve and are never listed.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from types import ModuleType
from typing import Any

from ..interfaces import Resolvable


class _NotFound:
    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND: Any = _NotFound()


def is_public(name: str) -> bool:
    return bool(name) and not name.startswith("_")


class MappingResolvable:
    """Resolves members of a dict-like record by key."""

    def __init__(self, mapping: Mapping[str, Any]) -> None:
        self._mapping = mapping

    def get_member(self, name: str) -> Any:
        if not is_public(name):
            return NOT_FOUND
        return self._mapping.get(name, NOT_FOUND)

    def member_names(self) -> list[str]:
        return [key for key in self._mapping if isinstance(key, str) and is_public(key)]


class ObjectResolvable:
    """Resolves attributes of a plain object; methods come back bound."""

    def __init__(self, obj: object) -> None:
        self._obj = obj

    def get_member(self, name: str) -> Any:
        if not is_public(name):
            return NOT_FOUND
        return getattr(self._obj, name, NOT_FOUND)

    def member_names(self) -> list[str]:
        return [name for name in dir(self._obj) if is_public(name)]


class ModuleResolvable(ObjectResolvable):
    """Resolves the exports of a module: ``__all__`` when defined, else its public globals."""

    def __init__(self, module: ModuleType) -> None:
        super().__init__(module)
        self._module = module

    def _exports(self) -> list[str]:
        exported = getattr(self._module, "__all__", None)
        if exported is not None:
            return [name for name in exported if is_public(name)]
        return [name for name, value in vars(self._module).items() if is_public(name) and self._is_own(value)]

    def _is_own(self, value: Any) -> bool:
        # Imported modules, functions and classes are not exports. Other
        # callables (partials, instances) carry no reliable origin and are kept.
        if isinstance(value, ModuleType):
            return False
        if inspect.isfunction(value) or inspect.isbuiltin(value) or inspect.isclass(value):
            return getattr(value, "__module__", None) == self._module.__name__
        return True

    def get_member(self, name: str) -> Any:
        if name not in self._exports():
            return NOT_FOUND
        return super().get_member(name)

    def member_names(self) -> list[str]:
        return self._exports()


def as_resolvable(obj: Any) -> Resolvable:
    """Wrap *obj* in the Resolvable matching its type."""
    if isinstance(obj, (MappingResolvable, ObjectResolvable)):
        return obj
    if isinstance(obj, ModuleType):
        return ModuleResolvable(obj)
    if isinstance(obj, Mapping):
        return MappingResolvable(obj)
    if isinstance(obj, Resolvable) and not isinstance(obj, type):
        return obj
    return ObjectResolvable(obj)
