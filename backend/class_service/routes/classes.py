"""
Class Service — Class Route Handlers
=====================================

What:  CRUD endpoints for classes under /api/v1/classes.
How:   Routes are thin: they extract path/query/body values, call the
       ClassService and shape the HTTP response (status, Location header).
       Errors are raised as ClassServiceError subclasses and rendered by the
       global exception handlers.

Route Inventory:
    POST   /api/v1/classes           → 201 + Location
    GET    /api/v1/classes           → 200 (filters + pagination)
    GET    /api/v1/classes/{id}      → 200 / 404
    PUT    /api/v1/classes/{id}      → 200 / 400
    PATCH  /api/v1/classes/{id}      → 200 / 400 / 404
    DELETE /api/v1/classes/{id}      → 204
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request, Response

from class_service.database import get_class_repository
from class_service.models import AcademicClass
from class_service.repositories import ClassRepository
from class_service.schemas.classes import ClassPayload, ErrorResponse
from class_service.services.class_service import ClassService
from class_service.services.queries import GetClassesQuery

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])


def get_class_service(
    repository: ClassRepository = Depends(get_class_repository),
) -> ClassService:
    return ClassService(repository)


@router.post(
    "",
    status_code=201,
    response_model=AcademicClass,
    responses={400: {"model": ErrorResponse}},
    summary="Create a class",
)
async def create_class(
    request: Request,
    response: Response,
    payload: Optional[ClassPayload] = Body(default=None),
    service: ClassService = Depends(get_class_service),
) -> AcademicClass:
    """
    Create a class. Identifiers missing on the class or on any embedded exam,
    student, professor or course are generated by the server.
    """
    entity = await service.create_class(payload)
    response.headers["Location"] = str(request.url_for("get_class_by_id", class_id=entity.id))
    return entity


@router.get(
    "",
    response_model=List[AcademicClass],
    summary="List classes with filters and pagination",
)
async def list_classes(
    year: Optional[int] = Query(default=None, description="Exact year"),
    semester: Optional[int] = Query(default=None, description="Exact semester"),
    course_id: Optional[str] = Query(default=None, description="Exact course identifier"),
    page: Optional[int] = Query(default=None, description="1-based page; <= 0 means 1"),
    size: Optional[int] = Query(default=None, description="Page size; <= 0 means 10"),
    service: ClassService = Depends(get_class_service),
) -> List[AcademicClass]:
    query = GetClassesQuery(
        year=year, semester=semester, course_id=course_id, page=page, size=size
    )
    return await service.list_classes(query)


@router.get(
    "/{class_id}",
    response_model=AcademicClass,
    responses={404: {"model": ErrorResponse}},
    summary="Get a class by ID",
)
async def get_class_by_id(
    class_id: str,
    service: ClassService = Depends(get_class_service),
) -> AcademicClass:
    return await service.get_class(class_id)


@router.put(
    "/{class_id}",
    response_model=AcademicClass,
    responses={400: {"model": ErrorResponse}},
    summary="Replace a class",
)
async def replace_class(
    class_id: str,
    payload: Optional[ClassPayload] = Body(default=None),
    service: ClassService = Depends(get_class_service),
) -> AcademicClass:
    """Full replace. The identifier in the path wins over one in the body."""
    return await service.replace_class(class_id, payload)


@router.patch(
    "/{class_id}",
    response_model=AcademicClass,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Partially update a class",
)
async def patch_class(
    class_id: str,
    updates: Optional[Dict[str, Any]] = Body(default=None),
    service: ClassService = Depends(get_class_service),
) -> AcademicClass:
    """
    Apply a field map such as `{"year": 2026, "schedule": "Noite"}`.

    Field names are case-insensitive. Unknown fields and values that cannot
    be converted are ignored; the response shows the merged class.
    """
    return await service.patch_class(class_id, updates)


@router.delete("/{class_id}", status_code=204, response_class=Response, summary="Delete a class")
async def delete_class(
    class_id: str,
    service: ClassService = Depends(get_class_service),
) -> Response:
    await service.delete_class(class_id)
    return Response(status_code=204)
