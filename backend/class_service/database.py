"""
Class Service — Document Store Connection Management
=====================================================

What:  Motor client factory, collection bootstrap and repository selection.
How:   The client is created once per application (connection is lazy, the
       driver connects on first use) and closed on shutdown. The repository
       instance is stored on `app.state` and handed to routes through the
       `get_class_repository` dependency.
Who:   Used by main.py (lifecycle) and the routes (dependency injection).

Bootstrap (idempotent, runs at every startup):
    1. Create the classes collection when it does not exist yet
    2. Ensure the (year, semester) index exists
"""

import logging
from typing import Optional, Tuple

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from class_service.config import Settings
from class_service.repositories import (
    ClassRepository,
    InMemoryClassRepository,
    MongoClassRepository,
)

logger = logging.getLogger(__name__)

YEAR_SEMESTER_INDEX = "year_1_semester_1"


def create_client(settings: Settings) -> AsyncIOMotorClient:
    # tz_aware: exam dates come back as UTC-aware datetimes, as they went in
    return AsyncIOMotorClient(
        settings.mongodb_connection_string,
        tz_aware=True,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
    )


def build_repository(
    settings: Settings,
) -> Tuple[ClassRepository, Optional[AsyncIOMotorClient]]:
    """
    Create the repository selected by `settings.repository_backend`.

    Returns:
        (repository, client). client is None for the in-memory backend and
        must be closed by the caller otherwise.
    """
    if settings.repository_backend == "memory":
        logger.info("Using in-memory class repository")
        return InMemoryClassRepository(), None

    client = create_client(settings)
    collection = client[settings.mongodb_database][settings.mongodb_collection]
    logger.info(
        "Using MongoDB class repository (%s.%s)",
        settings.mongodb_database,
        settings.mongodb_collection,
    )
    return MongoClassRepository(collection), client


async def ensure_collections_and_indexes(
    database: AsyncIOMotorDatabase, collection_name: str
) -> None:
    """
    Create the classes collection and its index when missing.

    Safe to run repeatedly: the collection is only created when
    list_collection_names does not report it, and create_index is a no-op
    for an existing index with the same specification.
    """
    existing = await database.list_collection_names(filter={"name": collection_name})
    if collection_name not in existing:
        await database.create_collection(collection_name)
        logger.info("Created collection %s.%s", database.name, collection_name)

    await database[collection_name].create_index(
        [("year", 1), ("semester", 1)], name=YEAR_SEMESTER_INDEX
    )


def close_client(client: Optional[AsyncIOMotorClient]) -> None:
    if client is not None:
        client.close()


def get_class_repository(request: Request) -> ClassRepository:
    """FastAPI dependency returning the application's repository."""
    return request.app.state.class_repository
