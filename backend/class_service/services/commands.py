"""
Class Service — Command Handlers (write side)
==============================================

What:  One handler per write use case: create, update (full replace), delete.
How:   Each handler checks the minimal structural precondition of its
       command, assigns missing identifiers where relevant, calls exactly one
       repository method and lets repository errors propagate untouched.

    CreateClassCommand ──▶ CreateClassCommandHandler ──▶ repository.create
    UpdateClassCommand ──▶ UpdateClassCommandHandler ──▶ repository.update
    DeleteClassCommand ──▶ DeleteClassCommandHandler ──▶ repository.delete
"""

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from class_service.exceptions import ValidationError
from class_service.models import AcademicClass
from class_service.repositories import ClassRepository

logger = logging.getLogger(__name__)

TCommand = TypeVar("TCommand")


class CommandHandler(ABC, Generic[TCommand]):
    @abstractmethod
    async def handle(self, command: TCommand) -> None:
        ...


def new_id() -> str:
    return str(uuid.uuid4())


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def assign_identifiers(entity: AcademicClass) -> None:
    """
    Give the class and every nested exam, student, professor and course an
    identifier when it has none. Existing identifiers are never touched.
    """
    if _is_blank(entity.id):
        entity.id = new_id()
    for exam in entity.exams:
        if exam is not None and _is_blank(exam.id):
            exam.id = new_id()
    for student in entity.students:
        if student is not None and _is_blank(student.id):
            student.id = new_id()
    for professor in entity.professors:
        if professor is not None and _is_blank(professor.id):
            professor.id = new_id()
    if entity.course is not None and _is_blank(entity.course.id):
        entity.course.id = new_id()


@dataclass
class CreateClassCommand:
    entity: Optional[AcademicClass]


@dataclass
class UpdateClassCommand:
    class_id: str
    entity: Optional[AcademicClass]


@dataclass
class DeleteClassCommand:
    class_id: str


class CreateClassCommandHandler(CommandHandler[CreateClassCommand]):
    def __init__(self, repository: ClassRepository):
        self._repository = repository

    async def handle(self, command: CreateClassCommand) -> None:
        if command.entity is None:
            raise ValidationError(message="Class payload is required", field="body")
        assign_identifiers(command.entity)
        await self._repository.create(command.entity)
        logger.info("Class %s created", command.entity.id)


class UpdateClassCommandHandler(CommandHandler[UpdateClassCommand]):
    """
    Full replace of a stored class.

    Nested entities added by the new representation get identifiers here;
    the class identifier itself is forced to the command's class_id.
    """

    def __init__(self, repository: ClassRepository):
        self._repository = repository

    async def handle(self, command: UpdateClassCommand) -> None:
        if command.entity is None:
            raise ValidationError(message="Class payload is required", field="body")
        command.entity.id = command.class_id
        assign_identifiers(command.entity)
        await self._repository.update(command.class_id, command.entity)


class DeleteClassCommandHandler(CommandHandler[DeleteClassCommand]):
    def __init__(self, repository: ClassRepository):
        self._repository = repository

    async def handle(self, command: DeleteClassCommand) -> None:
        await self._repository.delete(command.class_id)
        logger.info("Class %s deleted", command.class_id)
