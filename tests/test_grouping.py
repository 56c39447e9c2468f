"""Tests for member filters and protocol grouping."""

from __future__ import annotations

from types import ModuleType

from docmeta.grouping import is_no_doc, is_protocol_method, is_proxy, protocol_methods
from docmeta.introspect import Member

_MODULE = ModuleType("sample")


def _member(name: str, parent: str | None = None, **metadata) -> Member:
    return Member(module=_MODULE, name=name, value=None, metadata={"name": name, **metadata}, parent=parent)


def test_is_proxy_matches_generated_names() -> None:
    assert is_proxy(_member("<lambda>"))
    assert is_proxy(_member("proxy$Handler"))
    assert is_proxy(_member("not an identifier"))
    assert not is_proxy(_member("handler"))


def test_is_no_doc_accepts_both_flags() -> None:
    assert is_no_doc(_member("a", **{"no-doc": True}))
    assert is_no_doc(_member("b", **{"skip-wiki": True}))
    assert not is_no_doc(_member("c"))


def test_protocol_method_requires_protocol_in_module() -> None:
    protocol = _member("Shape")
    method = _member("area", parent="Shape", protocol="Shape")
    stray = _member("perimeter", protocol="Polygon")
    members = [protocol, method, stray]

    assert is_protocol_method(method, members)
    assert not is_protocol_method(stray, members)
    assert not is_protocol_method(protocol, members)


def test_protocol_methods_collects_owned_members_in_order() -> None:
    protocol = _member("Shape")
    area = _member("area", parent="Shape", protocol="Shape")
    scale = _member("scale", protocol="Shape")
    hidden = _member("debug", parent="Shape", protocol="Shape", **{"no-doc": True})
    other = _member("perimeter", parent="Polygon", protocol="Polygon")

    methods = protocol_methods(protocol, [protocol, area, hidden, other, scale])

    assert [method.name for method in methods] == ["area", "scale"]
