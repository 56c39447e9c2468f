"""Tests for type checker discovery."""

from __future__ import annotations

from types import ModuleType, SimpleNamespace

import pytest

from docmeta.typecheck import (
    HintTypeChecker,
    TypeChecker,
    TypeCheckTable,
    available_type_checkers,
    load_type_checker,
)


class DummyChecker(TypeChecker):
    """Test checker used for plugin discovery validation."""

    name = "dummy"

    def check_module(self, module: ModuleType) -> TypeCheckTable:  # pragma: no cover - unused
        return TypeCheckTable(module=module.__name__)


def _patch_entry_points(monkeypatch, *entries) -> None:
    class DummyEntryPoints(list):
        def select(self, **kwargs):
            if kwargs.get("group") == "docmeta.type_checkers":
                return self
            return []

    monkeypatch.setattr(
        "docmeta.typecheck.metadata.entry_points",
        lambda: DummyEntryPoints(entries),
        raising=False,
    )


def test_load_builtin_type_checker() -> None:
    checker = load_type_checker("annotations")
    assert isinstance(checker, HintTypeChecker)
    assert isinstance(load_type_checker("Annotations"), HintTypeChecker)


def test_load_type_checker_from_entry_point(monkeypatch) -> None:
    _patch_entry_points(monkeypatch, SimpleNamespace(name="dummy", load=lambda: DummyChecker))

    assert isinstance(load_type_checker("dummy"), DummyChecker)
    assert available_type_checkers() == ["annotations", "dummy"]


def test_entry_point_load_failure_is_reported(monkeypatch) -> None:
    def explode():
        raise ImportError("missing plugin dependency")

    _patch_entry_points(monkeypatch, SimpleNamespace(name="broken", load=explode))

    with pytest.raises(RuntimeError, match="broken"):
        load_type_checker("broken")


def test_entry_point_must_provide_a_checker(monkeypatch) -> None:
    _patch_entry_points(monkeypatch, SimpleNamespace(name="odd", load=lambda: 42))

    with pytest.raises(TypeError):
        load_type_checker("odd")


def test_unknown_type_checker_raises(monkeypatch) -> None:
    _patch_entry_points(monkeypatch)

    with pytest.raises(ValueError):
        load_type_checker("does-not-exist")
