"""FastAPI application entrypoint for blueprint service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import BlueprintConfig, load_config
from ..errors import BlueprintError, ChainClientError
from ..models import GeneratedUnit, ModuleAbi
from ..orchestrator import Orchestrator

_T = TypeVar("_T")


class RenderRequest(BaseModel):
    abi: Dict[str, Any]
    source: Optional[str] = None


class GenerateRequest(BaseModel):
    addresses: List[str] = Field(min_length=1)


class ModuleResponse(BaseModel):
    address: str
    module_name: str
    code: str
    functions: List[str] = Field(default_factory=list)
    failed: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)

    @classmethod
    def from_unit(cls, unit: GeneratedUnit) -> "ModuleResponse":
        return cls(
            address=unit.address,
            module_name=unit.module_name,
            code=unit.code,
            functions=list(unit.functions),
            failed=list(unit.failed),
            skipped=list(unit.skipped),
        )


class GenerateResponse(BaseModel):
    modules: List[ModuleResponse]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator(load_config(Path(".")))


async def _in_executor(func: Callable[[], _T]) -> _T:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing blueprint operations."""

    app = FastAPI(title="Blueprint Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Lazy-instantiate per request to keep state predictable.
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/render", response_model=ModuleResponse)
    async def render_module(
        payload: RenderRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ModuleResponse:
        abi = payload.abi.get("abi") if isinstance(payload.abi.get("abi"), dict) else payload.abi
        module = ModuleAbi.from_dict(abi)
        unit = await _in_executor(lambda: orchestrator.generate_module(module, payload.source))
        if unit is None:
            raise HTTPException(status_code=422, detail=f"No functions could be generated for {module.name}")
        return ModuleResponse.from_unit(unit)

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        results = await _in_executor(lambda: orchestrator.generate(payload.addresses))
        modules = [
            ModuleResponse.from_unit(unit)
            for units in results.values()
            for unit in units.values()
        ]
        return GenerateResponse(modules=modules)

    @app.exception_handler(BlueprintError)
    async def blueprint_error_handler(_: Any, exc: BlueprintError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ChainClientError)
    async def chain_error_handler(_: Any, exc: ChainClientError) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, *, config: BlueprintConfig | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    factory = (lambda: Orchestrator(config)) if config is not None else _default_orchestrator
    uvicorn.run(create_app(factory), host=host, port=port)
