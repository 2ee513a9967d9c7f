# Repositories package init
"""
Class Service — Persistence Layer
==================================

Repository Inventory:
    - ClassRepository (abstract): contract used by the command/query handlers
    - MongoClassRepository: production implementation on MongoDB (motor)
    - InMemoryClassRepository: list-backed implementation for local runs and tests
"""

from class_service.repositories.base import ClassRepository
from class_service.repositories.memory import InMemoryClassRepository
from class_service.repositories.mongo import MongoClassRepository

__all__ = ["ClassRepository", "InMemoryClassRepository", "MongoClassRepository"]
