"""
FILE: src/api/main.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_lifecycle_stage_service
from src.api.observability import setup_observability
from src.api.routers.rules import router as rule_catalog_router
from src.api.routers.simulations import router as simulation_router
from src.api.routers.stages import router as lifecycle_stage_router
from src.core.rules.predicates import get_predicate_engine_provider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _app_lifespan(_app: FastAPI):
    provider = get_predicate_engine_provider()
    if await provider.load() is None:
        logger.error(
            "Predicate engine unavailable at startup. Module=%s; rules will not match",
            provider.module_name,
        )
    get_lifecycle_stage_service()
    yield


app = FastAPI(
    title="Hedge Lifecycle Rules API",
    version="0.1.0",
    description=(
        "Rule authoring catalog and what-if simulation service for hedge lifecycle stages.\n\n"
        "Simulations run a stage's rules in priority order, record a per-rule trace and "
        "allocate the hedge amount across entities net of capital-adequacy buffers."
    ),
    openapi_tags=[
        {
            "name": "Rule Catalog",
            "description": "Field definitions, rule CRUD, validation and evaluation.",
        },
        {
            "name": "Lifecycle Stages",
            "description": "Ordered lifecycle stages and their rule sets.",
        },
        {
            "name": "What-If Simulation",
            "description": "Stage simulations and saved simulation environments.",
        },
    ],
    lifespan=_app_lifespan,
)

setup_observability(app)

app.include_router(rule_catalog_router)
app.include_router(lifecycle_stage_router)
app.include_router(simulation_router)


@app.exception_handler(Exception)
async def unhandled_exception_to_problem_details(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception while serving request", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        media_type="application/problem+json",
        content={
            "type": "about:blank",
            "title": "Internal Server Error",
            "status": 500,
            "detail": "An unexpected error occurred.",
            "instance": str(request.url.path),
        },
    )


@app.get("/health", tags=["Health"])
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health/live", tags=["Health"])
def health_live() -> dict[str, str]:
    return {"status": "live"}


@app.get("/health/ready", tags=["Health"])
def health_ready() -> dict[str, str]:
    if not get_predicate_engine_provider().ready:
        return {"status": "degraded", "predicate_engine": "unavailable"}
    return {"status": "ready"}
