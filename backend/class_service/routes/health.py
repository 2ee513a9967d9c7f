"""
Class Service — Health Check Route
===================================

What:  Liveness/readiness endpoint for container probes and load balancers.
How:   Pings the document store through the repository and reports one
       component entry for it.
Who:   Docker health checks, orchestrators, the platform's status page.

Response:
    {"status": "UP", "components": {"documentStore": {"status": "UP",
     "details": {"database": "classes", "collection": "Classes"}}}}

    HTTP 200 when UP, 503 when DOWN. Both /health and /api/v1/health are
    served and both are public (no token required).
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from class_service import __version__
from class_service.database import get_class_repository
from class_service.repositories import ClassRepository
from class_service.schemas.classes import ComponentHealth, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
    summary="Service health check",
)
@router.get("/api/v1/health", response_model=HealthResponse, include_in_schema=False)
async def health_check(
    repository: ClassRepository = Depends(get_class_repository),
) -> JSONResponse:
    try:
        details = await repository.ping()
        store = ComponentHealth(status="UP", details=details)
    except Exception as e:
        logger.warning("Health check: document store unreachable: %s", str(e))
        store = ComponentHealth(status="DOWN", details={"error": type(e).__name__})

    overall = "UP" if store.status == "UP" else "DOWN"
    body = HealthResponse(status=overall, components={repository.name: store})
    return JSONResponse(
        status_code=200 if overall == "UP" else 503,
        content=body.model_dump(),
    )


@router.get("/", include_in_schema=False)
async def root() -> dict:
    return {"service": "class-service", "version": __version__, "docs": "/swagger"}
