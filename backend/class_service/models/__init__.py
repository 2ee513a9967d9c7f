# Models package init
from class_service.models.classes import (
    AcademicClass,
    Course,
    Entity,
    Exam,
    Professor,
    Student,
)

__all__ = ["AcademicClass", "Course", "Entity", "Exam", "Professor", "Student"]
