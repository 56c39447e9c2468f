"""Documentation metadata extraction for Python source trees."""

from .extractor import Extractor, extract
from .meta import alter_meta, docmeta
from .models import MemberRecord, MemberType, ModuleRecord
from .reader import ModuleReader

__version__ = "0.1.0"

__all__ = [
    "Extractor",
    "MemberRecord",
    "MemberType",
    "ModuleReader",
    "ModuleRecord",
    "alter_meta",
    "docmeta",
    "extract",
]
