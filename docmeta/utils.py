"""Generic helpers for metadata maps, docstrings and source paths."""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Any, Callable, Dict, Iterable, Mapping, Sequence

from .logging import get_logger

_LOGGER = get_logger("reader")


def select_keys(mapping: Mapping[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Return a new dict restricted to ``keys`` that are present in ``mapping``."""
    return {key: mapping[key] for key in keys if key in mapping}


def update_some(
    mapping: Dict[str, Any], key: str, func: Callable[[Any], Any]
) -> Dict[str, Any]:
    """Apply ``func`` to ``mapping[key]`` only when the value is not None."""
    value = mapping.get(key)
    if value is not None:
        mapping[key] = func(value)
    return mapping


def is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def remove_empties(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None, an empty string or an empty collection."""
    return {key: value for key, value in mapping.items() if not is_empty(value)}


def correct_indent(text: str) -> str:
    """Strip the common indentation of every line after the first.

    Docstrings keep their first line flush with the opening quotes while the
    remaining lines carry the indentation of the surrounding code. Blank lines
    do not take part in computing the width.
    """
    lines = text.split("\n")
    rest = lines[1:]
    widths = [len(line) - len(line.lstrip()) for line in rest if line.strip()]
    if not widths:
        return text
    width = min(widths)
    if width == 0:
        return text
    return "\n".join([lines[0]] + [line[width:] for line in rest])


def canonical_path(path: str | Path) -> Path:
    return Path(path).expanduser().resolve()


def normalize_to_source_path(file: str, source_paths: Sequence[Path]) -> str:
    """Return ``file`` relative to the first source root containing it.

    Paths under no root are returned unchanged. Archive members such as
    ``/libs/pkg.whl/pkg/mod.py`` are handled lexically, so they relativize
    against the archive path.
    """
    candidate = PurePath(file)
    for root in source_paths:
        try:
            return candidate.relative_to(root).as_posix()
        except ValueError:
            continue
    return file


def default_exception_handler(
    subsystem: str, exc: BaseException, module_id: str
) -> None:
    """Log a module failure and carry on with the remaining modules."""
    _LOGGER.warning(
        "Could not generate %s documentation for %s - root cause: %s: %s",
        subsystem,
        module_id,
        type(exc).__name__,
        exc,
    )


__all__ = [
    "canonical_path",
    "correct_indent",
    "default_exception_handler",
    "is_empty",
    "normalize_to_source_path",
    "remove_empties",
    "select_keys",
    "update_some",
]
