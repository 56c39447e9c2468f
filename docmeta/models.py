"""Documentation records produced by the extraction pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .utils import remove_empties


class MemberType(str, Enum):
    """Closed set of member kinds."""

    VALUE = "value"
    MACRO = "macro"
    MULTIMETHOD = "multimethod"
    PROTOCOL = "protocol"


@dataclass(frozen=True)
class MemberRecord:
    """Normalized metadata for one public member of a module."""

    name: str
    type: MemberType
    file: Optional[str] = None
    line: Optional[int] = None
    arglists: Tuple[str, ...] = ()
    doc: Optional[str] = None
    dynamic: Optional[bool] = None
    added: Optional[str] = None
    deprecated: Optional[str] = None
    doc_format: Optional[str] = None
    type_sig: Optional[str] = None
    members: Tuple["MemberRecord", ...] = ()

    @classmethod
    def from_metadata(
        cls,
        metadata: Mapping[str, Any],
        *,
        type: MemberType,
        type_sig: Optional[str] = None,
        members: Tuple["MemberRecord", ...] = (),
    ) -> "MemberRecord":
        """Build a record, setting only the fields present in ``metadata``."""
        arglists = metadata.get("arglists") or ()
        return cls(
            name=str(metadata["name"]),
            type=type,
            file=metadata.get("file"),
            line=metadata.get("line"),
            arglists=tuple(arglists),
            doc=metadata.get("doc"),
            dynamic=True if metadata.get("dynamic") else None,
            added=_as_text(metadata.get("added")),
            deprecated=_as_text(metadata.get("deprecated")),
            doc_format=metadata.get("doc-format"),
            type_sig=type_sig,
            members=members,
        )

    def to_dict(self) -> Dict[str, Any]:
        return remove_empties(
            {
                "name": self.name,
                "file": self.file,
                "line": self.line,
                "arglists": list(self.arglists),
                "doc": self.doc,
                "type": self.type.value,
                "dynamic": self.dynamic,
                "added": self.added,
                "deprecated": self.deprecated,
                "doc-format": self.doc_format,
                "type-sig": self.type_sig,
                "members": [member.to_dict() for member in self.members],
            }
        )


@dataclass(frozen=True)
class ModuleRecord:
    """Documentation view of one module and its sorted public members."""

    name: str
    doc: Optional[str] = None
    author: Optional[str] = None
    annotations: Mapping[str, Any] = field(default_factory=dict)
    publics: Tuple[MemberRecord, ...] = ()

    @property
    def no_doc(self) -> bool:
        return bool(self.annotations.get("no-doc"))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        data.update(
            remove_empties({"doc": self.doc, "author": self.author, **self.annotations})
        )
        # Modules always carry their member list, even when it is empty.
        data["publics"] = [member.to_dict() for member in self.publics]
        return data


def _as_text(value: Any) -> Optional[str]:
    """Render a flag-or-text field: ``True`` becomes "true", ``False`` means absent."""
    if value is None or value is False:
        return None
    if value is True:
        return "true"
    return str(value)


__all__ = ["MemberRecord", "MemberType", "ModuleRecord"]
