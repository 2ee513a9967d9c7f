"""
Class Service — MongoDB Repository
===================================

What:  ClassRepository backed by a MongoDB collection through motor.
How:   One document per class. The class identifier is the document `_id`;
       exams, students, professors and course are embedded sub-documents
       with camelCase keys (the same shape as the JSON API).

Document shape:
    {
        "_id": "4f0c...",
        "classNumber": "101",
        "year": 2025,
        "semester": 1,
        "schedule": "Manha",
        "exams": [{"id": "e1", "name": "P1", "date": ISODate(...), "weight": 40}],
        "students": [{"id": "s1"}],
        "professors": [{"id": "p1"}],
        "course": {"id": "course-a"}
    }

Error Handling:
    DuplicateKeyError → ValidationError (identifier already taken)
    Any other PyMongoError → DatabaseError (details logged, generic message)
"""

import logging
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from class_service.exceptions import DatabaseError, ValidationError
from class_service.models import AcademicClass
from class_service.repositories.base import ClassRepository

logger = logging.getLogger(__name__)


def to_document(entity: AcademicClass) -> Dict[str, Any]:
    """Serialize an entity into its stored document (`id` becomes `_id`)."""
    document = entity.model_dump(by_alias=True)
    document["_id"] = document.pop("id")
    return document


def from_document(document: Dict[str, Any]) -> AcademicClass:
    data = dict(document)
    data["id"] = str(data.pop("_id"))
    return AcademicClass.model_validate(data)


class MongoClassRepository(ClassRepository):
    """
    Thin pass-through to a motor collection.

    The collection handle is injected so the repository can be unit-tested
    with a mocked collection and so the client lifecycle stays in database.py.
    """

    def __init__(self, collection: AsyncIOMotorCollection):
        self._collection = collection

    async def get_all(self) -> List[AcademicClass]:
        try:
            documents = await self._collection.find({}).to_list(length=None)
        except PyMongoError as e:
            raise self._wrap("get_all", e)
        return [from_document(d) for d in documents]

    async def get_by_id(self, class_id: str) -> Optional[AcademicClass]:
        try:
            document = await self._collection.find_one({"_id": class_id})
        except PyMongoError as e:
            raise self._wrap("get_by_id", e, class_id=class_id)
        if document is None:
            return None
        return from_document(document)

    async def create(self, entity: AcademicClass) -> None:
        try:
            await self._collection.insert_one(to_document(entity))
        except DuplicateKeyError:
            raise ValidationError(
                message=f"A class with ID '{entity.id}' already exists",
                field="id",
            )
        except PyMongoError as e:
            raise self._wrap("create", e, class_id=entity.id)
        logger.info("Class %s inserted", entity.id)

    async def update(self, class_id: str, entity: AcademicClass) -> None:
        document = to_document(entity)
        document["_id"] = class_id
        try:
            result = await self._collection.replace_one({"_id": class_id}, document)
        except PyMongoError as e:
            raise self._wrap("update", e, class_id=class_id)
        if result.matched_count == 0:
            logger.info("Replace of class %s matched no document", class_id)

    async def delete(self, class_id: str) -> None:
        try:
            await self._collection.delete_one({"_id": class_id})
        except PyMongoError as e:
            raise self._wrap("delete", e, class_id=class_id)

    async def ping(self) -> Dict[str, Any]:
        database = self._collection.database
        await database.command("ping")
        return {"database": database.name, "collection": self._collection.name}

    @staticmethod
    def _wrap(operation: str, error: PyMongoError, **context: Any) -> DatabaseError:
        logger.error(
            "MongoDB %s failed: %s | Context: %s", operation, str(error), context, exc_info=True
        )
        return DatabaseError(
            context={"operation": operation, "error_type": type(error).__name__, **context},
        )
