"""
Class Service — Exam Route Handlers
====================================

What:  Exam sub-resource of a class under /api/v1/classes/{class_id}/exams.
How:   Every operation loads the parent class first (404 when missing);
       id-scoped operations also require the exam to exist in that class.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Request, Response

from class_service.models import Exam
from class_service.routes.classes import get_class_service
from class_service.schemas.classes import ErrorResponse, ExamPayload
from class_service.services.class_service import ClassService

router = APIRouter(prefix="/api/v1/classes/{class_id}/exams", tags=["Exams"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=Exam,
    responses={400: {"model": ErrorResponse}, **_NOT_FOUND},
    summary="Add an exam to a class",
)
async def add_exam(
    class_id: str,
    request: Request,
    response: Response,
    payload: Optional[ExamPayload] = Body(default=None),
    service: ClassService = Depends(get_class_service),
) -> Exam:
    exam = await service.add_exam(class_id, payload)
    response.headers["Location"] = str(
        request.url_for("get_exam_by_id", class_id=class_id, exam_id=exam.id)
    )
    return exam


@router.get("", response_model=List[Exam], responses=_NOT_FOUND, summary="List a class's exams")
async def list_exams(
    class_id: str,
    service: ClassService = Depends(get_class_service),
) -> List[Exam]:
    return await service.list_exams(class_id)


@router.get("/{exam_id}", response_model=Exam, responses=_NOT_FOUND, summary="Get an exam")
async def get_exam_by_id(
    class_id: str,
    exam_id: str,
    service: ClassService = Depends(get_class_service),
) -> Exam:
    return await service.get_exam(class_id, exam_id)


@router.put(
    "/{exam_id}",
    response_model=Exam,
    responses={400: {"model": ErrorResponse}, **_NOT_FOUND},
    summary="Replace an exam's name, date and weight",
)
async def replace_exam(
    class_id: str,
    exam_id: str,
    payload: Optional[ExamPayload] = Body(default=None),
    service: ClassService = Depends(get_class_service),
) -> Exam:
    return await service.replace_exam(class_id, exam_id, payload)


@router.patch(
    "/{exam_id}",
    response_model=Exam,
    responses={400: {"model": ErrorResponse}, **_NOT_FOUND},
    summary="Partially update an exam",
)
async def patch_exam(
    class_id: str,
    exam_id: str,
    updates: Optional[Dict[str, Any]] = Body(default=None),
    service: ClassService = Depends(get_class_service),
) -> Exam:
    return await service.patch_exam(class_id, exam_id, updates)


@router.delete(
    "/{exam_id}",
    status_code=204,
    response_class=Response,
    responses=_NOT_FOUND,
    summary="Remove an exam from a class",
)
async def delete_exam(
    class_id: str,
    exam_id: str,
    service: ClassService = Depends(get_class_service),
) -> Response:
    await service.delete_exam(class_id, exam_id)
    return Response(status_code=204)
