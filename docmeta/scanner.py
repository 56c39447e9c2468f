"""Discovery of importable modules inside source directories and archives."""

from __future__ import annotations

import keyword
import os
import zipfile
from pathlib import Path, PurePosixPath
from typing import Iterable, Iterator, Optional, Sequence, Set

from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    ".tox",
    ".nox",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
    ".docmeta",
}

ARCHIVE_SUFFIXES = (".whl", ".zip", ".egg", ".pyz")

_SKIPPED_STEMS = {"__main__"}


def is_archive(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in ARCHIVE_SUFFIXES


def module_name(parts: Sequence[str]) -> Optional[str]:
    """Map the relative path parts of a ``.py`` file to a dotted module id.

    Returns None for files that cannot be imported under a plain name.
    """
    if not parts or not parts[-1].endswith(".py"):
        return None
    *packages, filename = parts
    stem = filename[: -len(".py")]
    if stem in _SKIPPED_STEMS:
        return None
    names = list(packages) if stem == "__init__" else [*packages, stem]
    if not names:
        return None
    for name in names:
        if not name.isidentifier() or keyword.iskeyword(name):
            return None
    return ".".join(names)


class ModuleScanner:
    """Finds the module ids importable from a source directory or archive."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def find_modules(self, path: Path) -> Optional[Set[str]]:
        """Return the module ids under ``path``, or None for unsupported entries."""
        if path.is_dir():
            return set(self._modules_in_dir(path))
        if is_archive(path):
            try:
                with zipfile.ZipFile(path) as archive:
                    return set(self._modules_in_archive(archive.namelist()))
            except zipfile.BadZipFile as exc:
                self.logger.warning("Skipping unreadable archive %s: %s", path, exc)
                return None
        return None

    def _modules_in_dir(self, root: Path) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = [
                name
                for name in dirnames
                if name not in _EXCLUDED_DIRS and name.isidentifier()
            ]
            rel_dir = Path(dirpath).relative_to(root)
            for filename in filenames:
                name = module_name([*rel_dir.parts, filename])
                if name is not None:
                    yield name

    def _modules_in_archive(self, entries: Iterable[str]) -> Iterator[str]:
        for entry in entries:
            if entry.endswith("/"):
                continue
            name = module_name(PurePosixPath(entry).parts)
            if name is not None:
                yield name


__all__ = ["ARCHIVE_SUFFIXES", "ModuleScanner", "is_archive", "module_name"]
