"""
Class Service — Domain Entities
================================

What:  Pydantic models for the records this service owns and stores.
How:   Python attributes are snake_case; the JSON (and document store)
       representation is camelCase through an alias generator, so
       `class_number` travels as `classNumber`.
Who:   Used by repositories, command/query handlers and routes.

Ownership:
    AcademicClass ──owns──▶ [Exam, ...]
                  ──refs──▶ [Student], [Professor], Course   (id-only stubs)

Students, professors and courses belong to other services; only their
identifiers are kept here.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Integer fields are stored as 32-bit ints in the document store
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


class Entity(BaseModel):
    """Base for every stored record: an opaque string identifier."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = Field(default=None, description="Server-assigned identifier")


class Student(Entity):
    pass


class Professor(Entity):
    pass


class Course(Entity):
    pass


class Exam(Entity):
    """A weighted assessment belonging to exactly one class."""

    name: Optional[str] = None
    date: Optional[datetime] = None
    weight: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX, description="Grading weight")


class AcademicClass(Entity):
    """
    A scheduled course offering: term, schedule, exams and roster.

    semester is expected to be 1 or 2 but is stored as given.
    """

    class_number: Optional[str] = Field(default=None, description="Display label")
    year: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX)
    semester: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX)
    schedule: Optional[str] = None
    exams: List[Exam] = Field(default_factory=list)
    students: List[Student] = Field(default_factory=list)
    professors: List[Professor] = Field(default_factory=list)
    course: Optional[Course] = None

    def find_exam(self, exam_id: str) -> Optional[Exam]:
        for exam in self.exams:
            if exam.id == exam_id:
                return exam
        return None
