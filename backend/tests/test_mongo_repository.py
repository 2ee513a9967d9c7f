"""
Class Service — MongoDB Repository Unit Tests
==============================================

What:  Document mapping, driver call shapes and error wrapping of
       MongoClassRepository, plus the startup bootstrap.
How:   The motor collection/database are replaced with AsyncMock/MagicMock;
       no MongoDB server is needed.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from class_service.database import YEAR_SEMESTER_INDEX, ensure_collections_and_indexes
from class_service.exceptions import DatabaseError, ValidationError
from class_service.models import AcademicClass, Course, Exam
from class_service.repositories.mongo import (
    MongoClassRepository,
    from_document,
    to_document,
)

STORED_DOCUMENT = {
    "_id": "c1",
    "classNumber": "101",
    "year": 2025,
    "semester": 1,
    "schedule": "Manha",
    "exams": [
        {"id": "e1", "name": "P1", "date": datetime(2025, 5, 10, tzinfo=timezone.utc), "weight": 40}
    ],
    "students": [{"id": "s1"}],
    "professors": [],
    "course": {"id": "course-a"},
}


@pytest.fixture
def collection():
    mock = MagicMock()
    mock.name = "Classes"
    mock.database.name = "classes"
    mock.database.command = AsyncMock(return_value={"ok": 1.0})
    mock.find_one = AsyncMock(return_value=None)
    mock.insert_one = AsyncMock()
    mock.replace_one = AsyncMock(return_value=MagicMock(matched_count=1))
    mock.delete_one = AsyncMock()
    return mock


class TestDocumentMapping:
    def test_to_document_uses_underscore_id_and_camel_case(self):
        entity = AcademicClass(id="c1", class_number="101", course=Course(id="course-a"))
        document = to_document(entity)

        assert document["_id"] == "c1"
        assert "id" not in document
        assert document["classNumber"] == "101"
        assert document["course"] == {"id": "course-a"}

    def test_from_document(self):
        entity = from_document(STORED_DOCUMENT)

        assert entity.id == "c1"
        assert entity.class_number == "101"
        assert entity.exams[0].weight == 40
        assert entity.course.id == "course-a"


class TestMongoClassRepository:
    @pytest.mark.asyncio
    async def test_get_all(self, collection):
        collection.find.return_value.to_list = AsyncMock(return_value=[STORED_DOCUMENT])
        repository = MongoClassRepository(collection)

        result = await repository.get_all()

        collection.find.assert_called_once_with({})
        assert [c.id for c in result] == ["c1"]

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, collection):
        repository = MongoClassRepository(collection)
        assert await repository.get_by_id("nope") is None
        collection.find_one.assert_awaited_once_with({"_id": "nope"})

    @pytest.mark.asyncio
    async def test_create_inserts_document(self, collection):
        repository = MongoClassRepository(collection)
        await repository.create(AcademicClass(id="c1", exams=[Exam(id="e1")]))

        inserted = collection.insert_one.await_args.args[0]
        assert inserted["_id"] == "c1"
        assert inserted["exams"][0]["id"] == "e1"

    @pytest.mark.asyncio
    async def test_duplicate_id_is_validation_error(self, collection):
        collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")
        repository = MongoClassRepository(collection)

        with pytest.raises(ValidationError):
            await repository.create(AcademicClass(id="c1"))

    @pytest.mark.asyncio
    async def test_update_replaces_by_path_id(self, collection):
        repository = MongoClassRepository(collection)
        await repository.update("c1", AcademicClass(id="other", year=2026))

        query, document = collection.replace_one.await_args.args
        assert query == {"_id": "c1"}
        assert document["_id"] == "c1"
        assert document["year"] == 2026

    @pytest.mark.asyncio
    async def test_driver_errors_become_database_errors(self, collection):
        collection.delete_one.side_effect = ServerSelectionTimeoutError("no servers")
        repository = MongoClassRepository(collection)

        with pytest.raises(DatabaseError) as exc_info:
            await repository.delete("c1")
        assert exc_info.value.context["operation"] == "delete"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_ping(self, collection):
        repository = MongoClassRepository(collection)
        details = await repository.ping()

        collection.database.command.assert_awaited_once_with("ping")
        assert details == {"database": "classes", "collection": "Classes"}


class TestBootstrap:
    def make_database(self, existing):
        database = MagicMock()
        database.name = "classes"
        database.list_collection_names = AsyncMock(return_value=existing)
        database.create_collection = AsyncMock()
        collection = MagicMock()
        collection.create_index = AsyncMock()
        database.__getitem__.return_value = collection
        return database, collection

    @pytest.mark.asyncio
    async def test_creates_missing_collection_and_index(self):
        database, collection = self.make_database([])

        await ensure_collections_and_indexes(database, "Classes")

        database.create_collection.assert_awaited_once_with("Classes")
        collection.create_index.assert_awaited_once_with(
            [("year", 1), ("semester", 1)], name=YEAR_SEMESTER_INDEX
        )

    @pytest.mark.asyncio
    async def test_existing_collection_is_left_alone(self):
        database, collection = self.make_database(["Classes"])

        await ensure_collections_and_indexes(database, "Classes")

        database.create_collection.assert_not_awaited()
        collection.create_index.assert_awaited_once()
