"""
Class Service — Repository Interface
=====================================

What:  Abstract contract for persisting and retrieving classes.
How:   Concrete implementations (MongoClassRepository, InMemoryClassRepository)
       implement every method. Handlers depend only on this interface.

The interface is deliberately a pass-through: no filtering, no partial
updates. `update` is a full replace of the stored document.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from class_service.models import AcademicClass


class ClassRepository(ABC):
    """Storage of AcademicClass documents keyed by their identifier."""

    #: Component name reported by the health endpoint
    name: str = "documentStore"

    @abstractmethod
    async def get_all(self) -> List[AcademicClass]:
        """Return every stored class in storage order."""

    @abstractmethod
    async def get_by_id(self, class_id: str) -> Optional[AcademicClass]:
        """Return the class or None when absent."""

    @abstractmethod
    async def create(self, entity: AcademicClass) -> None:
        """
        Insert a new class. The identifier must already be assigned.

        Raises:
            ValidationError: a class with the same identifier exists
            DatabaseError: the store failed
        """

    @abstractmethod
    async def update(self, class_id: str, entity: AcademicClass) -> None:
        """Replace the stored class. Missing classes are left absent."""

    @abstractmethod
    async def delete(self, class_id: str) -> None:
        """Delete the class if present; deleting a missing class is a no-op."""

    @abstractmethod
    async def ping(self) -> Dict[str, Any]:
        """
        Check that the store is reachable.

        Returns:
            Details to include in the health report.
        Raises:
            Any exception when the store is unreachable.
        """
