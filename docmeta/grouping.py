"""Member filters and protocol/method grouping."""

from __future__ import annotations

import re
from typing import List, Sequence

from .introspect import Member

# Generated entries reach a module namespace only through globals() or
# setattr, so their names are not plain identifiers ("<lambda>", "proxy$Foo").
_PROXY_NAME = re.compile(r"<\w+>|\$")


def is_proxy(member: Member) -> bool:
    return bool(_PROXY_NAME.search(member.name)) or not member.name.isidentifier()


def is_no_doc(member: Member) -> bool:
    return bool(member.metadata.get("no-doc") or member.metadata.get("skip-wiki"))


def owning_protocol(member: Member) -> str | None:
    owner = member.metadata.get("protocol")
    return str(owner) if owner else None


def is_protocol_method(member: Member, members: Sequence[Member]) -> bool:
    """True when the member's declared protocol is a top-level member of the module."""
    owner = owning_protocol(member)
    if owner is None:
        return False
    return any(candidate.parent is None and candidate.name == owner for candidate in members)


def protocol_methods(protocol: Member, members: Sequence[Member]) -> List[Member]:
    """Return the documented members that declare ``protocol`` as their owner, by name."""
    owned = [
        member
        for member in members
        if member is not protocol
        and owning_protocol(member) == protocol.name
        and not is_proxy(member)
        and not is_no_doc(member)
    ]
    return sorted(owned, key=lambda member: member.name)


__all__ = [
    "is_no_doc",
    "is_protocol_method",
    "is_proxy",
    "owning_protocol",
    "protocol_methods",
]
