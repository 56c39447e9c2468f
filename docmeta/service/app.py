"""FastAPI application entrypoint for docmeta service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ModuleFilterConfig
from ..extractor import Extractor
from ..reader import ModuleReader
from ..typecheck import load_type_checker


class ExtractRequest(BaseModel):
    paths: List[str]
    exclude: List[str] = Field(default_factory=list)
    type_checker: Optional[str] = None


class ModuleFailure(BaseModel):
    module: str
    error: str


class ExtractResponse(BaseModel):
    modules: List[Dict[str, Any]]
    failures: List[ModuleFailure] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str


ExtractorFactory = Callable[[ExtractRequest], Extractor]


def _default_extractor(payload: ExtractRequest) -> Extractor:
    type_checker = load_type_checker(payload.type_checker) if payload.type_checker else None
    return Extractor(
        reader=ModuleReader(type_checker=type_checker),
        module_filter=ModuleFilterConfig(exclude=list(payload.exclude)),
    )


def create_app(extractor_factory: ExtractorFactory = _default_extractor) -> FastAPI:
    """Create the FastAPI application exposing docmeta extraction."""

    app = FastAPI(title="docmeta", version="0.1.0")

    async def get_factory() -> ExtractorFactory:
        return extractor_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(
        payload: ExtractRequest,
        factory: ExtractorFactory = Depends(get_factory),
    ) -> ExtractResponse:
        failures: List[ModuleFailure] = []

        def _record_failure(exc: BaseException, module_id: str) -> None:
            failures.append(ModuleFailure(module=module_id, error=f"{type(exc).__name__}: {exc}"))

        def _run_extract() -> List[Dict[str, Any]]:
            extractor = factory(payload)
            records = extractor.extract(
                [Path(path) for path in payload.paths],
                exception_handler=_record_failure,
            )
            return [record.to_dict() for record in records]

        loop = asyncio.get_running_loop()
        modules = await loop.run_in_executor(None, _run_extract)
        return ExtractResponse(modules=modules, failures=failures)

    @app.exception_handler(ValueError)
    async def value_error_handler(
        _: Any, exc: ValueError
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


__all__ = ["create_app", "ExtractRequest", "ExtractResponse"]
