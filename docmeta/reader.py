"""Loading a single module and extracting its documentation record."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from types import ModuleType
from typing import Callable, List, Optional, Sequence

from .grouping import is_no_doc, is_protocol_method, is_proxy
from .introspect import Introspector, Member, PythonIntrospector
from .logging import get_logger
from .models import MemberRecord, ModuleRecord
from .normalize import DEFAULT_RECORD_FACTORY_PREFIX, MemberNormalizer
from .typecheck import TypeChecker, TypeCheckTable
from .utils import correct_indent, default_exception_handler

ExceptionHandler = Callable[[BaseException, str], None]

_TRANSIENT_KEYS = ("file", "line", "column", "end-line", "end-column")

default_handler: ExceptionHandler = partial(default_exception_handler, "Python")

_LOGGER = get_logger("reader")


class ModuleReader:
    """Loads modules one at a time and turns each into a :class:`ModuleRecord`.

    A module that fails to load or to extract is handed to the exception
    handler and produces no record; the failure never reaches the caller.
    """

    def __init__(
        self,
        introspector: Introspector | None = None,
        *,
        type_checker: TypeChecker | None = None,
        record_factory_prefix: str = DEFAULT_RECORD_FACTORY_PREFIX,
    ) -> None:
        self.introspector = introspector or PythonIntrospector()
        self.type_checker = type_checker
        self.record_factory_prefix = record_factory_prefix
        self.logger = get_logger("reader")

    def read_module(
        self,
        module_id: str,
        source_path: Path,
        source_paths: Sequence[Path] = (),
        exception_handler: ExceptionHandler | None = None,
    ) -> Optional[ModuleRecord]:
        """Return the record for ``module_id`` or None when it failed."""
        handler = exception_handler or default_handler
        roots = [source_path, *[path for path in source_paths if path != source_path]]

        self.logger.debug("Loading %s from %s", module_id, source_path)
        try:
            module = self.introspector.load_module(module_id, source_path)
            type_table = self._check_types(module)
            publics = self.read_publics(module, roots, type_table)
            record = self._module_record(module_id, module, publics)
        except (Exception, SystemExit) as exc:
            self.logger.debug("Failed to read %s: %r", module_id, exc)
            handler(exc, module_id)
            return None

        self.logger.debug("Loaded %s with %d public members", module_id, len(record.publics))
        return record

    def read_publics(
        self,
        module: ModuleType,
        source_paths: Sequence[Path],
        type_table: Optional[TypeCheckTable] = None,
    ) -> List[MemberRecord]:
        """Return the normalized public members of ``module`` sorted by name."""
        members = self.introspector.public_members(module)
        normalizer = MemberNormalizer(
            self.introspector,
            members,
            source_paths,
            type_table=type_table,
            record_factory_prefix=self.record_factory_prefix,
        )
        documented = [member for member in members if _is_documented(member, members)]
        records = _drop_shadowed_factories(
            documented, [normalizer.normalize(member) for member in documented]
        )
        return sorted(records, key=lambda record: record.name.lower())

    def _check_types(self, module: ModuleType) -> Optional[TypeCheckTable]:
        if self.type_checker is None:
            return None
        try:
            return self.type_checker.check_module(module)
        except Exception as exc:
            self.logger.debug(
                "Type checker %s failed on %s: %s",
                self.type_checker.name or type(self.type_checker).__name__,
                module.__name__,
                exc,
            )
            return None

    def _module_record(
        self, module_id: str, module: ModuleType, publics: Sequence[MemberRecord]
    ) -> ModuleRecord:
        meta = self.introspector.module_metadata(module)
        for key in (*_TRANSIENT_KEYS, "name", "publics"):
            meta.pop(key, None)
        doc = meta.pop("doc", None)
        author = meta.pop("author", None)
        return ModuleRecord(
            name=module_id,
            doc=correct_indent(doc) if isinstance(doc, str) else None,
            author=str(author) if author else None,
            annotations=meta,
            publics=tuple(publics),
        )


def _is_documented(member: Member, members: Sequence[Member]) -> bool:
    if member.parent is not None:
        return False
    if is_proxy(member) or is_no_doc(member):
        return False
    return not is_protocol_method(member, members)


def _drop_shadowed_factories(
    members: Sequence[Member], records: Sequence[MemberRecord]
) -> List[MemberRecord]:
    """Keep a single record per name when a factory was renamed to its record.

    A public record class documents itself, so the renamed factory is dropped.
    """
    defined = {record.name for member, record in zip(members, records) if member.name == record.name}
    kept = []
    for member, record in zip(members, records):
        if member.name != record.name and record.name in defined:
            _LOGGER.debug("Dropping factory %s in favour of record %s", member.name, record.name)
            continue
        kept.append(record)
    return kept


__all__ = ["ExceptionHandler", "ModuleReader", "default_handler"]
