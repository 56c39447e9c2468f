"""Top-level extraction over a sequence of source roots."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import DEFAULT_SOURCE_PATHS, ModuleFilterConfig
from .logging import get_logger
from .models import ModuleRecord
from .reader import ExceptionHandler, ModuleReader
from .scanner import ModuleScanner
from .typecheck import TypeChecker
from .utils import canonical_path


class Extractor:
    """Coordinates scanning, loading and filtering across source roots."""

    def __init__(
        self,
        scanner: ModuleScanner | None = None,
        reader: ModuleReader | None = None,
        module_filter: ModuleFilterConfig | None = None,
    ) -> None:
        self.scanner = scanner or ModuleScanner()
        self.reader = reader or ModuleReader()
        self.module_filter = module_filter or ModuleFilterConfig()
        self.logger = get_logger("extractor")

    def find_modules(self, path: str | Path) -> List[str]:
        """Return the sorted module ids that would be read from ``path``."""
        found = self.scanner.find_modules(canonical_path(path)) or set()
        return sorted(module_id for module_id in found if self.module_filter.allows(module_id))

    def extract(
        self,
        paths: Optional[Sequence[str | Path]] = None,
        *,
        exception_handler: ExceptionHandler | None = None,
    ) -> List[ModuleRecord]:
        """Read every documentable module under ``paths`` (defaults to ``["src"]``).

        Roots are processed in order and their records concatenated. Modules
        whose metadata sets ``no-doc`` are loaded but left out of the result.
        """
        roots = [canonical_path(path) for path in (paths if paths is not None else DEFAULT_SOURCE_PATHS)]
        records: List[ModuleRecord] = []
        for root in roots:
            records.extend(self._extract_root(root, roots, exception_handler))
        return records

    def _extract_root(
        self,
        root: Path,
        roots: Sequence[Path],
        exception_handler: ExceptionHandler | None,
    ) -> Iterable[ModuleRecord]:
        module_ids = self.scanner.find_modules(root)
        if module_ids is None:
            self.logger.warning("Skipping %s: not a directory or module archive", root)
            return []

        self.logger.info("Reading %d modules from %s", len(module_ids), root)
        records: List[ModuleRecord] = []
        for module_id in module_ids:
            if not self.module_filter.allows(module_id):
                self.logger.debug("Excluded %s by module filter", module_id)
                continue
            record = self.reader.read_module(module_id, root, roots, exception_handler)
            if record is None:
                continue
            if record.no_doc:
                self.logger.debug("Skipping %s marked no-doc", module_id)
                continue
            records.append(record)
        return records


def extract(
    paths: Optional[Sequence[str | Path]] = None,
    *,
    exception_handler: ExceptionHandler | None = None,
    type_checker: TypeChecker | None = None,
    include: Sequence[str] = (),
    exclude: Sequence[str] = (),
) -> List[ModuleRecord]:
    """Read documentation records for the modules under ``paths``.

    Supported options:
      exception_handler - callable ``(exc, module_id)`` invoked when a module
        fails to load; defaults to logging a warning and continuing.
      type_checker - optional collaborator attaching ``type-sig`` to members.
      include / exclude - glob patterns on module ids.

    Any module with ``{"no-doc": True}`` in its ``__docmeta__`` is skipped.
    """
    extractor = Extractor(
        reader=ModuleReader(type_checker=type_checker),
        module_filter=ModuleFilterConfig(include=list(include), exclude=list(exclude)),
    )
    return extractor.extract(paths, exception_handler=exception_handler)


__all__ = ["Extractor", "extract"]
