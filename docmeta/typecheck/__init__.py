"""Optional type-inference collaborators and their discovery."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterable, List

from .base import CheckResult, TypeChecker, TypeCheckTable
from .hints import HintTypeChecker

_ENTRY_POINT_GROUP = "docmeta.type_checkers"

_BUILTIN_FACTORIES: Dict[str, Callable[[], TypeChecker]] = {
    "annotations": HintTypeChecker,
}


def available_type_checkers() -> List[str]:
    """Return the names of built-in and installed type checkers."""
    names = list(_BUILTIN_FACTORIES)
    for entry in _iter_entry_points():
        if entry.name not in names:
            names.append(entry.name)
    return names


def load_type_checker(name: str) -> TypeChecker:
    """Instantiate the type checker registered under ``name``."""
    key = name.lower()
    factory = _BUILTIN_FACTORIES.get(key)
    if factory is not None:
        return factory()

    for entry in _iter_entry_points():
        if entry.name.lower() != key:
            continue
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load type checker entry point '{name}': {exc}") from exc
        return _coerce_type_checker(loaded)

    raise ValueError(f"Unknown type checker requested: {name}")


def _coerce_type_checker(obj: object) -> TypeChecker:
    if isinstance(obj, TypeChecker):
        return obj
    if isinstance(obj, type) and issubclass(obj, TypeChecker):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, TypeChecker):
            return instance
    raise TypeError("Type checker entry point must be a TypeChecker subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    entry_points = metadata.entry_points()
    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]
    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "CheckResult",
    "HintTypeChecker",
    "TypeCheckTable",
    "TypeChecker",
    "available_type_checkers",
    "load_type_checker",
]
