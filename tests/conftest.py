from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

import pytest

from tests._fixtures.source_tree import SourceTreeBuilder


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTreeBuilder:
    """Provide a source tree builder rooted at the pytest tmp_path."""
    return SourceTreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _isolate_imports(tmp_path_factory: pytest.TempPathFactory):
    """Forget the temporary modules and sys.path entries added by a test."""
    basetemp = tmp_path_factory.getbasetemp()
    bases = (str(basetemp), str(basetemp.resolve()))
    saved_path = list(sys.path)
    saved_modules = set(sys.modules)
    yield
    sys.path[:] = saved_path
    for name, module in list(sys.modules.items()):
        if name in saved_modules:
            continue
        if _is_temporary(module, bases):
            del sys.modules[name]
    importlib.invalidate_caches()


def _is_temporary(module: object, bases: tuple[str, ...]) -> bool:
    locations = [getattr(module, "__file__", None) or ""]
    locations.extend(getattr(module, "__path__", None) or [])
    return any(str(location).startswith(bases) for location in locations)


@pytest.fixture(autouse=True)
def _reset_docmeta_logger():
    """Undo configure_logging so caplog sees docmeta records in every test."""
    yield
    logger = logging.getLogger("docmeta")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
