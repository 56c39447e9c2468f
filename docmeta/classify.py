"""Classification of public members into the closed set of member kinds."""

from __future__ import annotations

import abc
import functools
import typing
from typing import Any, Mapping

from .models import MemberType

# The interface roots are themselves classes flagged as protocols (or bases of
# every ABC); they must never be reported as interfaces in their own right.
_INTERFACE_ROOTS = frozenset({typing.Protocol, typing.Generic, abc.ABC})


def is_macro(metadata: Mapping[str, Any]) -> bool:
    return bool(metadata.get("macro"))


def is_multimethod(value: Any) -> bool:
    """Return True for ``functools.singledispatch`` functions and methods."""
    if isinstance(value, functools.singledispatchmethod):
        return True
    return (
        callable(value)
        and callable(getattr(value, "register", None))
        and callable(getattr(value, "dispatch", None))
        and hasattr(value, "registry")
    )


def is_protocol(value: Any) -> bool:
    """Return True for classes that declare a polymorphic interface.

    ``typing.Protocol`` subclasses set ``_is_protocol`` in their own namespace;
    concrete implementations inherit the attribute with a false value, so
    only the class's own namespace is consulted.
    """
    if not isinstance(value, type) or value in _INTERFACE_ROOTS:
        return False
    if vars(value).get("_is_protocol"):
        return True
    return abc.ABC in value.__bases__


def classify(value: Any, metadata: Mapping[str, Any]) -> MemberType:
    """Return the kind of a member; the first matching check wins."""
    if is_macro(metadata):
        return MemberType.MACRO
    if is_multimethod(value):
        return MemberType.MULTIMETHOD
    if is_protocol(value):
        return MemberType.PROTOCOL
    return MemberType.VALUE


__all__ = ["classify", "is_macro", "is_multimethod", "is_protocol"]
