"""Module introspection capability used by the reader.

The reader never touches the import system or ``inspect`` directly; it asks
an :class:`Introspector` to load a module, enumerate its public members and
describe them as metadata maps. :class:`PythonIntrospector` implements this
on top of ``importlib`` and ``inspect`` for the running interpreter.
"""

from __future__ import annotations

import ast
import contextvars
import functools
import importlib
import inspect
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple

from .classify import is_multimethod, is_protocol
from .logging import get_logger
from .meta import declared_meta, member_overrides, module_meta

_IMPORT_ONLY_TYPES = frozenset({"__future__", "typing", "typing_extensions"})


@dataclass(frozen=True)
class Member:
    """A public member of a loaded module together with its raw metadata."""

    module: ModuleType
    name: str
    value: Any = field(compare=False)
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)
    parent: Optional[str] = None

    @property
    def qualname(self) -> str:
        return f"{self.parent}.{self.name}" if self.parent else self.name


class Introspector(ABC):
    """Contract between the reader and the host's module machinery."""

    @abstractmethod
    def load_module(self, module_id: str, source_path: Path) -> ModuleType:
        """Load ``module_id`` from ``source_path``; errors propagate to the caller."""

    @abstractmethod
    def module_metadata(self, module: ModuleType) -> Dict[str, Any]:
        """Return the module-level metadata map."""

    @abstractmethod
    def public_members(self, module: ModuleType) -> List[Member]:
        """Enumerate the module's public members in a stable order."""

    def metadata(self, member: Member) -> Mapping[str, Any]:
        return member.metadata

    def runtime_value(self, member: Member) -> Any:
        return member.value


class PythonIntrospector(Introspector):
    """Introspects modules of the running interpreter."""

    def __init__(self) -> None:
        self.logger = get_logger("introspect")

    def load_module(self, module_id: str, source_path: Path) -> ModuleType:
        entry = str(source_path)
        if entry not in sys.path:
            # sys.path and sys.modules only grow; loaded modules stay registered.
            sys.path.insert(0, entry)
            self.logger.debug("Added %s to sys.path", entry)
        importlib.invalidate_caches()
        return importlib.import_module(module_id)

    def module_metadata(self, module: ModuleType) -> Dict[str, Any]:
        meta: Dict[str, Any] = {}
        namespace = vars(module)
        if isinstance(namespace.get("__doc__"), str):
            meta["doc"] = namespace["__doc__"]
        if namespace.get("__author__"):
            meta["author"] = namespace["__author__"]
        if namespace.get("__docformat__"):
            meta["doc-format"] = namespace["__docformat__"]
        file = getattr(module, "__file__", None)
        if file:
            meta["file"] = file
        meta.update(module_meta(module))
        return meta

    def public_members(self, module: ModuleType) -> List[Member]:
        top_level: List[Member] = []
        for name in sorted(self._public_names(module)):
            value = getattr(module, name)
            if inspect.ismodule(value):
                continue
            top_level.append(self._member(module, name, value))

        members = list(top_level)
        for member in top_level:
            if is_protocol(member.value):
                members.extend(self._interface_methods(module, member))
        return members

    # ------------------------------------------------------------------
    # Enumeration

    def _public_names(self, module: ModuleType) -> List[str]:
        declared = getattr(module, "__all__", None)
        if declared is not None:
            names = []
            for name in declared:
                if hasattr(module, name):
                    names.append(str(name))
                else:
                    self.logger.debug("%s.__all__ names missing member %s", module.__name__, name)
            return list(dict.fromkeys(names))
        imported = _imported_names(module)
        return [
            name
            for name, value in vars(module).items()
            if not name.startswith("_") and _defined_in(name, value, module, imported)
        ]

    def _interface_methods(self, module: ModuleType, protocol: Member) -> Iterator[Member]:
        for name, raw in sorted(vars(protocol.value).items()):
            if name.startswith("_"):
                continue
            if isinstance(raw, (staticmethod, classmethod)):
                raw = raw.__func__
            if not (inspect.isroutine(raw) or isinstance(raw, property) or is_multimethod(raw)):
                continue
            yield self._member(module, name, raw, parent=protocol.name)

    # ------------------------------------------------------------------
    # Metadata

    def _member(
        self, module: ModuleType, name: str, value: Any, parent: Optional[str] = None
    ) -> Member:
        meta: Dict[str, Any] = {"name": name}
        file, line = _source_location(value)
        if file is None:
            file = getattr(module, "__file__", None)
        if file:
            meta["file"] = file
        if line:
            meta["line"] = line
        if not is_protocol(value):
            arglists = _arglists(value)
            if arglists:
                meta["arglists"] = arglists
        doc = _own_doc(value)
        if doc:
            meta["doc"] = doc
        if isinstance(value, contextvars.ContextVar):
            meta["dynamic"] = True
        deprecated = getattr(value, "__deprecated__", None)
        if isinstance(deprecated, str):
            meta["deprecated"] = deprecated
        if parent is not None:
            meta["protocol"] = parent
        meta.update(declared_meta(value))
        qualname = f"{parent}.{name}" if parent else name
        meta.update(member_overrides(module, qualname))
        return Member(module=module, name=name, value=value, metadata=meta, parent=parent)


def _defined_in(
    name: str, value: Any, module: ModuleType, imported: Optional[Set[str]]
) -> bool:
    """Filter re-exports.

    Functions and classes must originate in ``module``. Any other value counts
    unless a top-level import bound its name. Without source, values of
    compiler-feature and typing types are treated as imported.
    """
    if inspect.ismodule(value):
        return False
    if inspect.isclass(value) or inspect.isroutine(value) or is_multimethod(value):
        return getattr(value, "__module__", None) == module.__name__
    if imported is None:
        return type(value).__module__ not in _IMPORT_ONLY_TYPES
    return name not in imported


def _imported_names(module: ModuleType) -> Optional[Set[str]]:
    """Return the names bound by import statements at the top level of ``module``.

    Imports nested in ``if``, ``try`` or ``with`` blocks count. Imports inside
    functions and classes bind local names and are ignored. Returns None when
    the module source is unavailable.
    """
    try:
        tree = ast.parse(inspect.getsource(module))
    except (OSError, TypeError, SyntaxError):
        return None
    names: Set[str] = set()
    pending: List[ast.AST] = list(tree.body)
    while pending:
        node = pending.pop()
        if isinstance(node, (ast.Import, ast.ImportFrom)):
            for alias in node.names:
                if alias.name != "*":
                    names.add(alias.asname or alias.name.split(".")[0])
        elif not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            pending.extend(
                child
                for child in ast.iter_child_nodes(node)
                if isinstance(child, (ast.stmt, ast.excepthandler))
            )
    return names


def _location_target(value: Any) -> Any:
    if isinstance(value, property):
        value = value.fget
    elif isinstance(value, functools.singledispatchmethod):
        value = value.func
    try:
        return inspect.unwrap(value) if callable(value) else value
    except ValueError:
        return value


def _source_location(value: Any) -> Tuple[Optional[str], Optional[int]]:
    target = _location_target(value)
    code = getattr(target, "__code__", None)
    if code is not None:
        return code.co_filename, code.co_firstlineno
    if inspect.isclass(target):
        try:
            file = inspect.getsourcefile(target)
        except TypeError:
            return None, None
        line = getattr(target, "__firstlineno__", None)
        if line is None:
            try:
                _, line = inspect.getsourcelines(target)
            except (OSError, TypeError):
                line = None
        return file, line
    return None, None


def _arglists(value: Any) -> List[str]:
    if isinstance(value, functools.singledispatchmethod):
        value = value.func
    if isinstance(value, property) or not callable(value):
        return []
    try:
        signature = inspect.signature(value)
    except (TypeError, ValueError):
        return []
    return [str(signature)]


def _own_doc(value: Any) -> Optional[str]:
    """Return the docstring written for ``value`` itself.

    Instances of ordinary types would otherwise report their class's
    docstring, so only routines, classes, properties and dispatch functions
    contribute one.
    """
    if isinstance(value, functools.singledispatchmethod):
        value = value.func
    if (
        inspect.isroutine(value)
        or inspect.isclass(value)
        or isinstance(value, property)
        or is_multimethod(value)
    ):
        doc = getattr(value, "__doc__", None)
        return doc if isinstance(doc, str) else None
    return None


__all__ = ["Introspector", "Member", "PythonIntrospector"]
