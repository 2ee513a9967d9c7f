"""
Class Service — Query Handlers (read side)
===========================================

What:  GetClassById, GetClasses (filter + pagination) and GetExams.
How:   Each handler performs one repository read. GetClasses filters the full
       collection in process, in a fixed order, then slices the page.

Filter order for GetClasses:
    1. year      (exact match, when given)
    2. semester  (exact match, when given)
    3. course_id (exact match on class.course.id; classes without a course
                  never match)
    then skip (page - 1) * size, take size. Original storage order is kept.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from class_service.models import AcademicClass, Exam
from class_service.repositories import ClassRepository

TQuery = TypeVar("TQuery")
TResult = TypeVar("TResult")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


class QueryHandler(ABC, Generic[TQuery, TResult]):
    @abstractmethod
    async def handle(self, query: TQuery) -> TResult:
        ...


@dataclass
class GetClassByIdQuery:
    class_id: str


@dataclass
class GetExamsQuery:
    class_id: str


@dataclass
class GetClassesQuery:
    """
    List query with normalized parameters.

    Normalization happens at construction:
        page <= 0 or None  → 1
        size <= 0 or None  → 10   (no upper bound)
        blank course_id    → None (no filter)
    """

    year: Optional[int] = None
    semester: Optional[int] = None
    course_id: Optional[str] = None
    page: Optional[int] = DEFAULT_PAGE
    size: Optional[int] = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.course_id is not None and not self.course_id.strip():
            self.course_id = None
        if self.page is None or self.page <= 0:
            self.page = DEFAULT_PAGE
        if self.size is None or self.size <= 0:
            self.size = DEFAULT_PAGE_SIZE


class GetClassByIdQueryHandler(QueryHandler[GetClassByIdQuery, Optional[AcademicClass]]):
    def __init__(self, repository: ClassRepository):
        self._repository = repository

    async def handle(self, query: GetClassByIdQuery) -> Optional[AcademicClass]:
        return await self._repository.get_by_id(query.class_id)


def filter_and_paginate(classes: List[AcademicClass], query: GetClassesQuery) -> List[AcademicClass]:
    """Apply the GetClasses filters and page window to an in-memory list."""
    matching = classes
    if query.year is not None:
        matching = [c for c in matching if c.year == query.year]
    if query.semester is not None:
        matching = [c for c in matching if c.semester == query.semester]
    if query.course_id:
        matching = [
            c for c in matching if c.course is not None and c.course.id == query.course_id
        ]

    start = (query.page - 1) * query.size
    return matching[start:start + query.size]


class GetClassesQueryHandler(QueryHandler[GetClassesQuery, List[AcademicClass]]):
    def __init__(self, repository: ClassRepository):
        self._repository = repository

    async def handle(self, query: GetClassesQuery) -> List[AcademicClass]:
        classes = await self._repository.get_all()
        return filter_and_paginate(classes, query)


class GetExamsQueryHandler(QueryHandler[GetExamsQuery, Optional[List[Exam]]]):
    """Returns the exams of a class, or None when the class does not exist."""

    def __init__(self, repository: ClassRepository):
        self._repository = repository

    async def handle(self, query: GetExamsQuery) -> Optional[List[Exam]]:
        entity = await self._repository.get_by_id(query.class_id)
        if entity is None:
            return None
        return list(entity.exams)
