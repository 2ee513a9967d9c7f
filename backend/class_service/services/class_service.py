"""
Class Service — Class Orchestrator
===================================

What:  Composes the command/query handlers into the operations behind each
       REST endpoint, including the embedded exam sub-resource.
How:   Every write goes through UpdateClassCommandHandler as a full
       read → mutate in process → write back of the owning class.
Who:   Called by the route handlers; one instance per request (it only holds
       the handlers, which only hold the repository).

Concurrency note:
    PATCH and the exam operations read the class, change it in memory and
    replace the stored document. There is no version field, so two
    concurrent writers on the same class can lose one of the updates.

Error Handling:
    Missing body / empty patch / duplicate exam id → ValidationError (400)
    Unknown class or exam                           → NotFoundError (404)
    Repository failures propagate unchanged
"""

import logging
from typing import Any, Dict, List, Optional

from class_service.exceptions import NotFoundError, ValidationError
from class_service.models import AcademicClass, Exam
from class_service.repositories import ClassRepository
from class_service.schemas.classes import ClassPayload, ExamPayload
from class_service.services.commands import (
    CreateClassCommand,
    CreateClassCommandHandler,
    DeleteClassCommand,
    DeleteClassCommandHandler,
    UpdateClassCommand,
    UpdateClassCommandHandler,
    new_id,
)
from class_service.services.patching import patch_class, patch_exam
from class_service.services.queries import (
    GetClassByIdQuery,
    GetClassByIdQueryHandler,
    GetClassesQuery,
    GetClassesQueryHandler,
    GetExamsQuery,
    GetExamsQueryHandler,
)

logger = logging.getLogger(__name__)


def ensure_unique_exam_ids(entity: AcademicClass) -> None:
    seen = set()
    for exam in entity.exams:
        if not exam.id:
            continue
        if exam.id in seen:
            raise ValidationError(
                message=f"Duplicate exam ID '{exam.id}' in class",
                field="exams",
            )
        seen.add(exam.id)


class ClassService:
    def __init__(self, repository: ClassRepository):
        self.get_classes_handler = GetClassesQueryHandler(repository)
        self.get_by_id_handler = GetClassByIdQueryHandler(repository)
        self.get_exams_handler = GetExamsQueryHandler(repository)
        self.create_handler = CreateClassCommandHandler(repository)
        self.update_handler = UpdateClassCommandHandler(repository)
        self.delete_handler = DeleteClassCommandHandler(repository)

    # ── Classes ───────────────────────────────────────────────────────────

    async def create_class(self, payload: Optional[ClassPayload]) -> AcademicClass:
        if payload is None:
            raise ValidationError(message="Class payload is required", field="body")
        entity = payload.to_entity()
        ensure_unique_exam_ids(entity)
        await self.create_handler.handle(CreateClassCommand(entity))
        return entity

    async def list_classes(self, query: GetClassesQuery) -> List[AcademicClass]:
        return await self.get_classes_handler.handle(query)

    async def get_class(self, class_id: str) -> AcademicClass:
        entity = await self.get_by_id_handler.handle(GetClassByIdQuery(class_id))
        if entity is None:
            raise NotFoundError(resource="class", resource_id=class_id)
        return entity

    async def replace_class(self, class_id: str, payload: Optional[ClassPayload]) -> AcademicClass:
        if payload is None:
            raise ValidationError(message="Class payload is required", field="body")
        entity = payload.to_entity()
        ensure_unique_exam_ids(entity)
        await self.update_handler.handle(UpdateClassCommand(class_id, entity))
        return entity

    async def patch_class(self, class_id: str, updates: Optional[Dict[str, Any]]) -> AcademicClass:
        if not updates:
            raise ValidationError(message="Patch document must contain at least one field")
        entity = await self.get_class(class_id)
        patch_class(entity, updates)
        await self.update_handler.handle(UpdateClassCommand(class_id, entity))
        logger.info("Class %s patched (%d fields supplied)", class_id, len(updates))
        return entity

    async def delete_class(self, class_id: str) -> None:
        await self.delete_handler.handle(DeleteClassCommand(class_id))

    # ── Exams ─────────────────────────────────────────────────────────────

    async def list_exams(self, class_id: str) -> List[Exam]:
        exams = await self.get_exams_handler.handle(GetExamsQuery(class_id))
        if exams is None:
            raise NotFoundError(resource="class", resource_id=class_id)
        return exams

    async def get_exam(self, class_id: str, exam_id: str) -> Exam:
        entity = await self.get_class(class_id)
        return self._require_exam(entity, exam_id)

    async def add_exam(self, class_id: str, payload: Optional[ExamPayload]) -> Exam:
        if payload is None:
            raise ValidationError(message="Exam payload is required", field="body")
        entity = await self.get_class(class_id)
        exam = payload.to_entity()
        if exam.id and entity.find_exam(exam.id) is not None:
            raise ValidationError(
                message=f"Exam with ID '{exam.id}' already exists in class",
                field="id",
            )
        if not exam.id or not exam.id.strip():
            exam.id = new_id()
        entity.exams.append(exam)
        await self.update_handler.handle(UpdateClassCommand(class_id, entity))
        logger.info("Exam %s added to class %s", exam.id, class_id)
        return exam

    async def replace_exam(
        self, class_id: str, exam_id: str, payload: Optional[ExamPayload]
    ) -> Exam:
        if payload is None:
            raise ValidationError(message="Exam payload is required", field="body")
        entity = await self.get_class(class_id)
        exam = self._require_exam(entity, exam_id)
        exam.name = payload.name
        exam.date = payload.date
        exam.weight = payload.weight
        await self.update_handler.handle(UpdateClassCommand(class_id, entity))
        return exam

    async def patch_exam(
        self, class_id: str, exam_id: str, updates: Optional[Dict[str, Any]]
    ) -> Exam:
        if not updates:
            raise ValidationError(message="Patch document must contain at least one field")
        entity = await self.get_class(class_id)
        exam = self._require_exam(entity, exam_id)
        patch_exam(exam, updates)
        await self.update_handler.handle(UpdateClassCommand(class_id, entity))
        return exam

    async def delete_exam(self, class_id: str, exam_id: str) -> None:
        entity = await self.get_class(class_id)
        exam = self._require_exam(entity, exam_id)
        entity.exams = [e for e in entity.exams if e is not exam]
        await self.update_handler.handle(UpdateClassCommand(class_id, entity))
        logger.info("Exam %s removed from class %s", exam_id, class_id)

    @staticmethod
    def _require_exam(entity: AcademicClass, exam_id: str) -> Exam:
        exam = entity.find_exam(exam_id)
        if exam is None:
            raise NotFoundError(resource="exam", resource_id=exam_id)
        return exam
