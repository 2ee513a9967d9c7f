"""
Class Service — In-Memory Repository
=====================================

What:  List-backed ClassRepository for local runs (REPOSITORY_BACKEND=memory)
       and the test suite.
How:   Entities are deep-copied on the way in and out so callers never share
       instances with the store, the same as with a real document store.
"""

import logging
from typing import Any, Dict, List, Optional

from class_service.exceptions import ValidationError
from class_service.models import AcademicClass
from class_service.repositories.base import ClassRepository

logger = logging.getLogger(__name__)


class InMemoryClassRepository(ClassRepository):
    def __init__(self, initial: Optional[List[AcademicClass]] = None):
        self._store: List[AcademicClass] = [c.model_copy(deep=True) for c in initial or []]

    def _index_of(self, class_id: str) -> int:
        for idx, stored in enumerate(self._store):
            if stored.id == class_id:
                return idx
        return -1

    async def get_all(self) -> List[AcademicClass]:
        return [c.model_copy(deep=True) for c in self._store]

    async def get_by_id(self, class_id: str) -> Optional[AcademicClass]:
        idx = self._index_of(class_id)
        if idx < 0:
            return None
        return self._store[idx].model_copy(deep=True)

    async def create(self, entity: AcademicClass) -> None:
        if entity.id and self._index_of(entity.id) >= 0:
            raise ValidationError(
                message=f"A class with ID '{entity.id}' already exists",
                field="id",
            )
        self._store.append(entity.model_copy(deep=True))
        logger.debug("Stored class %s (%d in memory)", entity.id, len(self._store))

    async def update(self, class_id: str, entity: AcademicClass) -> None:
        idx = self._index_of(class_id)
        if idx >= 0:
            self._store[idx] = entity.model_copy(deep=True)

    async def delete(self, class_id: str) -> None:
        idx = self._index_of(class_id)
        if idx >= 0:
            del self._store[idx]

    async def ping(self) -> Dict[str, Any]:
        return {"backend": "memory", "classes": len(self._store)}
