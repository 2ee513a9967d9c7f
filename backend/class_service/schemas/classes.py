"""
Class Service — Request/Response Schemas
=========================================

What:  Pydantic models defining the API contract of the classes endpoints.
How:   FastAPI validates request bodies against these models and uses them for
       the generated OpenAPI document.

Request payloads are separate from the stored entities: a create payload may
carry a single `exam`/`student`/`professor` convenience field that is folded
into the entity's lists, and identifiers are optional on input.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from class_service.models import AcademicClass, Course, Exam, Professor, Student
from class_service.models.classes import INT32_MAX, INT32_MIN


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReferencePayload(_Payload):
    """Identifier-only reference to a student, professor or course."""

    id: Optional[str] = None


class ExamPayload(_Payload):
    id: Optional[str] = Field(default=None, description="Optional; generated when absent")
    name: Optional[str] = None
    date: Optional[datetime] = None
    weight: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX)

    def to_entity(self) -> Exam:
        return Exam(id=self.id, name=self.name, date=self.date, weight=self.weight)


class ClassPayload(_Payload):
    """
    Body of POST /api/v1/classes and PUT /api/v1/classes/{id}.

    Lists and the singular convenience fields may be combined; singular
    entries are appended after the list entries.
    """

    id: Optional[str] = Field(default=None, description="Ignored on PUT (path id wins)")
    class_number: Optional[str] = None
    year: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX)
    semester: int = Field(default=0, ge=INT32_MIN, le=INT32_MAX)
    schedule: Optional[str] = None
    course: Optional[ReferencePayload] = None
    exams: List[ExamPayload] = Field(default_factory=list)
    students: List[ReferencePayload] = Field(default_factory=list)
    professors: List[ReferencePayload] = Field(default_factory=list)
    exam: Optional[ExamPayload] = None
    student: Optional[ReferencePayload] = None
    professor: Optional[ReferencePayload] = None

    def to_entity(self) -> AcademicClass:
        exams = [e.to_entity() for e in self.exams]
        students = [Student(id=s.id) for s in self.students]
        professors = [Professor(id=p.id) for p in self.professors]
        if self.exam is not None:
            exams.append(self.exam.to_entity())
        if self.student is not None:
            students.append(Student(id=self.student.id))
        if self.professor is not None:
            professors.append(Professor(id=self.professor.id))
        return AcademicClass(
            id=self.id,
            class_number=self.class_number,
            year=self.year,
            semester=self.semester,
            schedule=self.schedule,
            exams=exams,
            students=students,
            professors=professors,
            course=Course(id=self.course.id) if self.course is not None else None,
        )


class ErrorResponse(BaseModel):
    """
    Standardized error envelope for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "class with ID 'c1' was not found",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class ComponentHealth(BaseModel):
    status: str = Field(description="UP or DOWN")
    details: Dict[str, Any] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Returned by GET /health: overall status plus one entry per dependency."""

    status: str = Field(description="Overall service status: UP or DOWN")
    components: Dict[str, ComponentHealth] = Field(default_factory=dict)
