"""Conversion of raw member metadata into stable member records."""

from __future__ import annotations

import re
from functools import partial
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

from .classify import classify
from .grouping import protocol_methods
from .introspect import Introspector, Member
from .models import MemberRecord, MemberType
from .typecheck import TypeCheckTable
from .utils import correct_indent, normalize_to_source_path, select_keys, update_some

DEFAULT_RECORD_FACTORY_PREFIX = "make_"

RECOGNIZED_KEYS = (
    "name",
    "file",
    "line",
    "arglists",
    "doc",
    "dynamic",
    "added",
    "deprecated",
    "doc-format",
)


def include_record_factory_as_record(
    metadata: Mapping[str, Any], prefix: str = DEFAULT_RECORD_FACTORY_PREFIX
) -> Dict[str, Any]:
    """Document ``make_Point`` as the record ``Point`` it builds.

    The factory's own docstring and signature describe the factory rather
    than the record, so both are dropped.
    """
    meta = dict(metadata)
    name = str(meta.get("name", ""))
    if prefix and re.match(re.escape(prefix) + r"[A-Z]", name):
        meta["name"] = name[len(prefix):]
        meta.pop("doc", None)
        meta.pop("arglists", None)
    return meta


class MemberNormalizer:
    """Normalizes the members of one module against a set of source roots."""

    def __init__(
        self,
        introspector: Introspector,
        members: Sequence[Member],
        source_paths: Sequence[Path],
        *,
        type_table: Optional[TypeCheckTable] = None,
        record_factory_prefix: str = DEFAULT_RECORD_FACTORY_PREFIX,
    ) -> None:
        self.introspector = introspector
        self.members = list(members)
        self.source_paths = list(source_paths)
        self.type_table = type_table
        self.record_factory_prefix = record_factory_prefix

    def normalize(self, member: Member) -> MemberRecord:
        raw = self.introspector.metadata(member)
        meta = include_record_factory_as_record(raw, self.record_factory_prefix)
        meta = select_keys(meta, RECOGNIZED_KEYS)
        update_some(meta, "doc", correct_indent)
        update_some(meta, "file", partial(normalize_to_source_path, source_paths=self.source_paths))

        kind = classify(self.introspector.runtime_value(member), raw)
        nested = ()
        if kind is MemberType.PROTOCOL:
            nested = tuple(self.normalize(method) for method in protocol_methods(member, self.members))

        return MemberRecord.from_metadata(
            meta,
            type=kind,
            type_sig=self._type_sig(member),
            members=nested,
        )

    def _type_sig(self, member: Member) -> Optional[str]:
        if self.type_table is None:
            return None
        return self.type_table.type_sig(member.qualname)


__all__ = [
    "DEFAULT_RECORD_FACTORY_PREFIX",
    "MemberNormalizer",
    "RECOGNIZED_KEYS",
    "include_record_factory_as_record",
]
