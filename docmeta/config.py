"""Configuration loading for docmeta (.docmeta.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .normalize import DEFAULT_RECORD_FACTORY_PREFIX

CONFIG_FILENAME = ".docmeta.yml"
DEFAULT_SOURCE_PATHS = ("src",)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ModuleFilterConfig:
    """Glob patterns selecting which discovered modules are loaded."""

    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)

    def allows(self, module_id: str) -> bool:
        if self.include and not any(fnmatchcase(module_id, pattern) for pattern in self.include):
            return False
        return not any(fnmatchcase(module_id, pattern) for pattern in self.exclude)


@dataclass
class DocMetaConfig:
    """Represents the settings defined in .docmeta.yml."""

    root: Path
    source_paths: List[Path] = field(default_factory=list)
    modules: ModuleFilterConfig = field(default_factory=ModuleFilterConfig)
    type_checker: Optional[str] = None
    record_factory_prefix: str = DEFAULT_RECORD_FACTORY_PREFIX
    output: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.source_paths:
            self.source_paths = [self.root / path for path in DEFAULT_SOURCE_PATHS]


def load_config(config_path: Path) -> DocMetaConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocMetaConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_paths = [root / path for path in _as_str_list(data.get("source_paths"))]

    modules_data = _as_dict(data.get("modules"))
    modules = ModuleFilterConfig()
    if modules_data:
        modules.include = _as_str_list(modules_data.get("include"))
        modules.exclude = _as_str_list(modules_data.get("exclude"))

    prefix = data.get("record_factory_prefix", DEFAULT_RECORD_FACTORY_PREFIX)
    if prefix is not None and not isinstance(prefix, str):
        raise ConfigError("record_factory_prefix must be a string")

    output = _as_str(data.get("output"))

    return DocMetaConfig(
        root=root,
        source_paths=source_paths,
        modules=modules,
        type_checker=_as_str(data.get("type_checker")),
        record_factory_prefix=prefix or "",
        output=root / output if output else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DocMetaConfig",
    "ModuleFilterConfig",
    "load_config",
]
