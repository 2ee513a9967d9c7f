"""
Class Service — Query Handler Tests
====================================

What we test:
    ✅ GetClassesQuery parameter normalization
    ✅ Filter order (year → semester → course) and page window
    ✅ GetClassById / GetExams against the in-memory repository
"""

import pytest

from class_service.models import AcademicClass, Course, Exam
from class_service.repositories import InMemoryClassRepository
from class_service.services.queries import (
    GetClassByIdQuery,
    GetClassByIdQueryHandler,
    GetClassesQuery,
    GetClassesQueryHandler,
    GetExamsQuery,
    GetExamsQueryHandler,
    filter_and_paginate,
)


def five_classes():
    return [
        AcademicClass(id="c1", year=2024, semester=1, course=Course(id="course-a")),
        AcademicClass(id="c2", year=2024, semester=2, course=Course(id="course-b")),
        AcademicClass(id="c3", year=2025, semester=1, course=Course(id="course-a")),
        AcademicClass(id="c4", year=2025, semester=2, course=Course(id="course-a")),
        AcademicClass(id="c5", year=2025, semester=1, course=Course(id="course-a")),
    ]


class TestQueryNormalization:
    @pytest.mark.parametrize("page", [None, 0, -3])
    def test_non_positive_page_becomes_one(self, page):
        assert GetClassesQuery(page=page).page == 1

    @pytest.mark.parametrize("size", [None, 0, -1])
    def test_non_positive_size_becomes_ten(self, size):
        assert GetClassesQuery(size=size).size == 10

    def test_large_size_is_not_capped(self):
        assert GetClassesQuery(size=5000).size == 5000

    @pytest.mark.parametrize("course_id", ["", "   "])
    def test_blank_course_id_means_no_filter(self, course_id):
        assert GetClassesQuery(course_id=course_id).course_id is None


class TestFilterAndPaginate:
    def test_combined_filters_and_second_page(self):
        query = GetClassesQuery(year=2025, semester=1, course_id="course-a", page=2, size=1)
        result = filter_and_paginate(five_classes(), query)
        assert [c.id for c in result] == ["c5"]

    def test_no_filters_returns_first_page_in_storage_order(self):
        result = filter_and_paginate(five_classes(), GetClassesQuery())
        assert [c.id for c in result] == ["c1", "c2", "c3", "c4", "c5"]

    def test_classes_without_course_never_match_course_filter(self):
        classes = five_classes() + [AcademicClass(id="c6", year=2025, semester=1)]
        result = filter_and_paginate(classes, GetClassesQuery(course_id="course-a", size=50))
        assert "c6" not in [c.id for c in result]

    def test_page_past_the_end_is_empty(self):
        result = filter_and_paginate(five_classes(), GetClassesQuery(page=3, size=5))
        assert result == []

    def test_year_only(self):
        result = filter_and_paginate(five_classes(), GetClassesQuery(year=2024))
        assert [c.id for c in result] == ["c1", "c2"]


class TestQueryHandlers:
    def setup_method(self):
        self.repository = InMemoryClassRepository(five_classes())

    @pytest.mark.asyncio
    async def test_get_classes_reads_everything_then_filters(self):
        handler = GetClassesQueryHandler(self.repository)
        result = await handler.handle(GetClassesQuery(semester=2))
        assert [c.id for c in result] == ["c2", "c4"]

    @pytest.mark.asyncio
    async def test_get_class_by_id_missing_returns_none(self):
        handler = GetClassByIdQueryHandler(self.repository)
        assert await handler.handle(GetClassByIdQuery("nope")) is None

    @pytest.mark.asyncio
    async def test_get_exams(self):
        await self.repository.update(
            "c1",
            AcademicClass(id="c1", year=2024, semester=1, exams=[Exam(id="e1", weight=50)]),
        )
        handler = GetExamsQueryHandler(self.repository)

        exams = await handler.handle(GetExamsQuery("c1"))

        assert [e.id for e in exams] == ["e1"]
        assert await handler.handle(GetExamsQuery("missing")) is None
