"""Tests for loading single modules into records."""

from __future__ import annotations

from types import ModuleType

from docmeta.reader import ModuleReader
from docmeta.typecheck import TypeChecker, TypeCheckTable


class RecordingHandler:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, exc: BaseException, module_id: str) -> None:
        self.calls.append((type(exc), module_id))


class ExplodingChecker(TypeChecker):
    name = "exploding"

    def check_module(self, module: ModuleType) -> TypeCheckTable:
        raise RuntimeError("checker crashed")


def test_failed_import_invokes_handler_once(source_tree) -> None:
    root = source_tree.write({"broken_mod.py": "import does_not_exist_anywhere\n"})
    handler = RecordingHandler()

    record = ModuleReader().read_module("broken_mod", root, [root], handler)

    assert record is None
    assert handler.calls == [(ModuleNotFoundError, "broken_mod")]


def test_system_exit_during_import_is_contained(source_tree) -> None:
    root = source_tree.write({"exiting_mod.py": "raise SystemExit(3)\n"})
    handler = RecordingHandler()

    record = ModuleReader().read_module("exiting_mod", root, [root], handler)

    assert record is None
    assert handler.calls == [(SystemExit, "exiting_mod")]


def test_default_handler_logs_warning(source_tree, caplog) -> None:
    root = source_tree.write({"syntax_mod.py": "def broken(:\n"})

    with caplog.at_level("WARNING", logger="docmeta"):
        record = ModuleReader().read_module("syntax_mod", root, [root])

    assert record is None
    assert "Could not generate Python documentation for syntax_mod" in caplog.text
    assert "SyntaxError" in caplog.text


def test_publics_are_sorted_case_insensitively(source_tree) -> None:
    root = source_tree.write(
        {
            "ordering.py": '''
            def beta():
                """Beta."""

            def Alpha():
                """Alpha."""

            Gamma = 3

            def _hidden():
                pass
            '''
        }
    )

    record = ModuleReader().read_module("ordering", root, [root])

    assert [member.name for member in record.publics] == ["Alpha", "beta", "Gamma"]


def test_no_doc_and_proxy_members_are_removed(source_tree) -> None:
    root = source_tree.write(
        {
            "filtered.py": '''
            from docmeta import alter_meta, docmeta

            @docmeta(no_doc=True)
            def internal():
                pass

            @docmeta(skip_wiki=True)
            def wiki_only():
                pass

            def visible():
                """Shown."""

            LIMIT = 10
            alter_meta(__name__, "LIMIT", no_doc=True)
            globals()["proxy$Visible"] = visible
            '''
        }
    )

    record = ModuleReader().read_module("filtered", root, [root])

    assert [member.name for member in record.publics] == ["visible"]


def test_module_record_fields(source_tree) -> None:
    root = source_tree.write(
        {
            "pkg_alpha/__init__.py": '''
            """Alpha package.

                Second paragraph.
            """

            __author__ = "Grace"
            __docmeta__ = {"added": "2.0", "line": 7}
            '''
        }
    )

    record = ModuleReader().read_module("pkg_alpha", root, [root])

    assert record.name == "pkg_alpha"
    assert record.doc == "Alpha package.\n\nSecond paragraph.\n"
    assert record.author == "Grace"
    assert dict(record.annotations) == {"added": "2.0"}
    assert record.to_dict() == {
        "name": "pkg_alpha",
        "doc": "Alpha package.\n\nSecond paragraph.\n",
        "author": "Grace",
        "added": "2.0",
        "publics": [],
    }


def test_empty_module_still_lists_publics(source_tree) -> None:
    root = source_tree.write({"empty_mod.py": ""})

    record = ModuleReader().read_module("empty_mod", root, [root])

    assert record.to_dict() == {"name": "empty_mod", "publics": []}


def test_type_checker_failure_is_ignored(source_tree) -> None:
    root = source_tree.write({"checked_mod.py": "def run(x: int) -> int:\n    return x\n"})
    handler = RecordingHandler()

    record = ModuleReader(type_checker=ExplodingChecker()).read_module(
        "checked_mod", root, [root], handler
    )

    assert handler.calls == []
    assert [member.name for member in record.publics] == ["run"]
    assert record.publics[0].type_sig is None


def test_protocol_methods_are_nested_not_top_level(source_tree) -> None:
    root = source_tree.write(
        {
            "protocols_mod.py": '''
            import abc

            from docmeta import docmeta


            class Store(abc.ABC):
                """Persistent storage."""

                @abc.abstractmethod
                def get(self, key):
                    """Fetch a value."""

                def helper(self):
                    pass


            @docmeta(protocol="Store")
            def put(store, key, value):
                """Store a value."""
            '''
        }
    )

    record = ModuleReader().read_module("protocols_mod", root, [root])

    assert [member.name for member in record.publics] == ["Store"]
    store = record.publics[0]
    assert store.type.value == "protocol"
    assert [member.name for member in store.members] == ["get", "helper", "put"]
    assert store.members[0].doc == "Fetch a value."
    assert store.members[0].file == "protocols_mod.py"


def test_factory_is_dropped_when_record_class_is_public(source_tree) -> None:
    root = source_tree.write(
        {
            "record_class_mod.py": '''
            class Foo:
                """A foo."""


            def make_Foo(x):
                """Build a Foo."""
                return Foo()
            '''
        }
    )

    record = ModuleReader().read_module("record_class_mod", root, [root])

    assert [member.to_dict()["name"] for member in record.publics] == ["Foo"]
    assert record.publics[0].doc == "A foo."
    assert record.publics[0].type.value == "value"


def test_equal_names_keep_enumeration_order(source_tree) -> None:
    root = source_tree.write(
        {
            "ties_mod.py": '''
            a = 1
            A = 2


            def foo():
                pass


            def make_Foo():
                pass
            '''
        }
    )

    record = ModuleReader().read_module("ties_mod", root, [root])

    # Members are enumerated by exact name, so "A" precedes "a" and "foo"
    # precedes "make_Foo" (documented as "Foo").
    assert [member.name for member in record.publics] == ["A", "a", "foo", "Foo"]
