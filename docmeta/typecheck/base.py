"""Contracts for optional type-inference collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import ModuleType
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class CheckResult:
    """Outcome of checking one member: an inferred type or a list of errors."""

    type: Optional[str] = None
    errors: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class TypeCheckTable:
    """Per-member results produced by checking a whole module."""

    module: str
    results: Dict[str, CheckResult] = field(default_factory=dict)

    def lookup(self, qualname: str) -> Optional[CheckResult]:
        return self.results.get(qualname)

    def type_sig(self, qualname: str) -> Optional[str]:
        """Return the inferred type for ``qualname`` when it was checked without errors."""
        result = self.lookup(qualname)
        if result is None or not result.ok:
            return None
        return result.type


class TypeChecker(ABC):
    """Contract for collaborators that attach ``type-sig`` to members."""

    name: str = ""

    @abstractmethod
    def check_module(self, module: ModuleType) -> TypeCheckTable:
        """Check ``module`` once and return the results for its members."""
