"""Helpers for attaching documentation metadata to modules and members.

Functions and classes carry their metadata in a ``__docmeta__`` dict set by
the :func:`docmeta` decorator. Members that cannot hold attributes (plain
values) are annotated through :func:`alter_meta`, which records the metadata
in the owning module's ``__docmeta_members__`` table. Module-level metadata is
a ``__docmeta__`` dict defined in the module itself::

    __docmeta__ = {"no-doc": True}
"""

from __future__ import annotations

import sys
from types import ModuleType
from typing import Any, Callable, Dict, Mapping, TypeVar, Union

META_ATTR = "__docmeta__"
MEMBERS_ATTR = "__docmeta_members__"

_T = TypeVar("_T")


def normalise_keys(meta: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert Python-style keyword names (``no_doc``) to metadata keys (``no-doc``)."""
    return {key.replace("_", "-"): value for key, value in meta.items()}


def declared_meta(obj: object) -> Dict[str, Any]:
    """Return the metadata declared directly on ``obj``.

    Classes are read through their own namespace so that a subclass does not
    inherit the metadata of its base.
    """
    if isinstance(obj, type):
        found = vars(obj).get(META_ATTR)
    else:
        found = getattr(obj, META_ATTR, None)
    return dict(found) if isinstance(found, Mapping) else {}


def docmeta(**meta: Any) -> Callable[[_T], _T]:
    """Decorate a function or class with documentation metadata.

    Recognised keys include ``added``, ``deprecated``, ``doc_format``,
    ``dynamic``, ``macro``, ``no_doc``, ``skip_wiki`` and ``protocol`` (the
    name of the protocol a module-level function implements).
    """

    def decorate(obj: _T) -> _T:
        merged = declared_meta(obj)
        merged.update(normalise_keys(meta))
        setattr(obj, META_ATTR, merged)
        return obj

    return decorate


def alter_meta(module: Union[str, ModuleType], name: str, **changes: Any) -> Dict[str, Any]:
    """Merge ``changes`` into the metadata of member ``name`` of ``module``.

    Returns the member's resulting metadata overrides.
    """
    target = sys.modules[module] if isinstance(module, str) else module
    table = vars(target).setdefault(MEMBERS_ATTR, {})
    entry = table.setdefault(name, {})
    entry.update(normalise_keys(changes))
    return dict(entry)


def member_overrides(module: ModuleType, qualname: str) -> Dict[str, Any]:
    table = vars(module).get(MEMBERS_ATTR)
    if not isinstance(table, Mapping):
        return {}
    entry = table.get(qualname)
    return normalise_keys(entry) if isinstance(entry, Mapping) else {}


def module_meta(module: ModuleType) -> Dict[str, Any]:
    found = vars(module).get(META_ATTR)
    return normalise_keys(found) if isinstance(found, Mapping) else {}


__all__ = [
    "META_ATTR",
    "MEMBERS_ATTR",
    "alter_meta",
    "declared_meta",
    "docmeta",
    "member_overrides",
    "module_meta",
    "normalise_keys",
]
