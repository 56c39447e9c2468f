"""Type signatures derived from a module's own annotations."""

from __future__ import annotations

import inspect
from types import ModuleType
from typing import Any, Dict, Iterator, Tuple

from ..logging import get_logger
from .base import CheckResult, TypeChecker, TypeCheckTable

_LOGGER = get_logger("typecheck")


class HintTypeChecker(TypeChecker):
    """Reports the evaluated annotations of callables and module variables.

    Functions, classes and the public methods of classes get their evaluated
    signature; annotated module-level variables get their evaluated
    annotation. Members without annotations are left out of the table, and an
    annotation that cannot be evaluated is reported as an error.
    """

    name = "annotations"

    def check_module(self, module: ModuleType) -> TypeCheckTable:
        table = TypeCheckTable(module=module.__name__)
        for name, annotation in _module_annotations(module).items():
            if name.startswith("_"):
                continue
            table.results[name] = _evaluate(module, name, annotation)

        for qualname, value in _callables(module):
            result = _check_callable(value)
            if result is not None:
                table.results[qualname] = result
        return table


def _module_annotations(module: ModuleType) -> Dict[str, Any]:
    try:
        return dict(inspect.get_annotations(module))
    except Exception as exc:
        _LOGGER.debug("Could not read annotations of %s: %s", module.__name__, exc)
        return {}


def _callables(module: ModuleType) -> Iterator[Tuple[str, Any]]:
    for name, value in vars(module).items():
        if name.startswith("_"):
            continue
        if inspect.isclass(value):
            if value.__module__ != module.__name__:
                continue
            yield name, value
            for attr, raw in vars(value).items():
                if attr.startswith("_"):
                    continue
                if isinstance(raw, (staticmethod, classmethod)):
                    raw = raw.__func__
                if inspect.isfunction(raw):
                    yield f"{name}.{attr}", raw
        elif callable(value) and getattr(value, "__module__", None) == module.__name__:
            yield name, value


def _check_callable(value: Any) -> CheckResult | None:
    try:
        raw = inspect.signature(value)
    except (TypeError, ValueError):
        return None
    if not _is_annotated(raw):
        return None
    try:
        evaluated = inspect.signature(value, eval_str=True)
    except Exception as exc:
        return CheckResult(errors=(f"{type(exc).__name__}: {exc}",))
    return CheckResult(type=str(evaluated))


def _is_annotated(signature: inspect.Signature) -> bool:
    if signature.return_annotation is not inspect.Signature.empty:
        return True
    return any(
        parameter.annotation is not inspect.Parameter.empty
        for parameter in signature.parameters.values()
    )


def _evaluate(module: ModuleType, name: str, annotation: Any) -> CheckResult:
    """Evaluate one module-level annotation in the module's namespace."""
    holder = ModuleType(module.__name__)
    holder.__annotations__ = {name: annotation}
    try:
        evaluated = inspect.get_annotations(holder, globals=vars(module), eval_str=True)
    except Exception as exc:
        return CheckResult(errors=(f"{type(exc).__name__}: {exc}",))
    return CheckResult(type=inspect.formatannotation(evaluated[name]))


__all__ = ["HintTypeChecker"]
