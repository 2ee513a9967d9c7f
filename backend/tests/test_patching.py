"""
Class Service — Partial Update Resolver Tests
==============================================

What we test:
    ✅ Case-insensitive field names, camelCase and snake_case
    ✅ Scalar coercion (int from string/float, str from number)
    ✅ Null resets, unknown fields ignored, bad values skipped
    ✅ Nested objects replaced wholesale, lists validated
    ✅ Enum matching by member name
"""

import enum
from datetime import datetime, timezone

import pytest

from class_service.models import AcademicClass, Course, Exam, Student
from class_service.services.patching import (
    FieldSpec,
    PatchSchema,
    apply_patch,
    coerce_int,
    enum_coercer,
    normalize_field_name,
    patch_class,
    patch_exam,
)


def make_class(**overrides) -> AcademicClass:
    data = dict(
        id="c1",
        class_number="101",
        year=2025,
        semester=1,
        schedule="Manha",
        exams=[Exam(id="e1", name="P1", weight=40)],
        students=[Student(id="s1")],
        course=Course(id="course-a"),
    )
    data.update(overrides)
    return AcademicClass(**data)


class TestFieldNames:
    def test_normalize_ignores_case_and_separators(self):
        assert normalize_field_name("Class_Number") == "classnumber"
        assert normalize_field_name("classNumber") == "classnumber"
        assert normalize_field_name("class-number") == "classnumber"

    def test_pascal_case_keys_apply(self):
        entity = make_class()
        patch_class(entity, {"Year": 2026, "Schedule": "Noite", "Semester": 2})

        assert entity.year == 2026
        assert entity.schedule == "Noite"
        assert entity.semester == 2
        assert entity.class_number == "101"

    def test_camel_and_snake_case_resolve_to_same_field(self):
        entity = make_class()
        patch_class(entity, {"classNumber": "202"})
        assert entity.class_number == "202"
        patch_class(entity, {"class_number": "303"})
        assert entity.class_number == "303"


class TestCoercion:
    def test_int_from_numeric_string(self):
        entity = make_class()
        patch_class(entity, {"year": "2030"})
        assert entity.year == 2030

    def test_int_from_integral_float(self):
        assert coerce_int(2026.0) == 2026

    def test_non_integral_float_is_skipped(self):
        entity = make_class()
        patch_class(entity, {"year": 2026.5, "schedule": "Tarde"})
        assert entity.year == 2025
        assert entity.schedule == "Tarde"

    @pytest.mark.parametrize("raw", [10**20, 2**31, -(2**31) - 1, "99999999999", 1e12])
    def test_int_outside_32_bit_range_is_skipped(self, raw):
        entity = make_class()
        patch_class(entity, {"year": raw, "schedule": "Noite"})
        assert entity.year == 2025
        assert entity.schedule == "Noite"

    def test_int_32_bit_bounds_are_accepted(self):
        assert coerce_int(2**31 - 1) == 2**31 - 1
        assert coerce_int(str(-(2**31))) == -(2**31)

    def test_exam_list_with_out_of_range_weight_is_skipped(self):
        entity = make_class()
        patch_class(entity, {"exams": [{"id": "e9", "weight": 10**20}]})
        assert [e.id for e in entity.exams] == ["e1"]

    def test_unparseable_value_skips_only_that_field(self):
        entity = make_class()
        patch_class(entity, {"semester": "second", "year": 2027})
        assert entity.semester == 1
        assert entity.year == 2027

    def test_number_to_string_field(self):
        entity = make_class()
        patch_class(entity, {"classNumber": 404})
        assert entity.class_number == "404"

    def test_object_for_string_field_is_skipped(self):
        entity = make_class()
        patch_class(entity, {"schedule": {"period": "night"}})
        assert entity.schedule == "Manha"

    def test_exam_date_from_iso_string(self):
        exam = Exam(id="e1", name="P1", weight=10)
        patch_exam(exam, {"date": "2025-05-10T10:00:00Z", "Weight": "30"})
        assert exam.date == datetime(2025, 5, 10, 10, 0, tzinfo=timezone.utc)
        assert exam.weight == 30

    def test_invalid_exam_date_keeps_previous(self):
        original = datetime(2025, 1, 1, tzinfo=timezone.utc)
        exam = Exam(id="e1", date=original)
        patch_exam(exam, {"date": "not a date"})
        assert exam.date == original


class TestNullsAndUnknowns:
    def test_null_resets_fields(self):
        entity = make_class()
        patch_class(entity, {"schedule": None, "year": None, "exams": None, "course": None})
        assert entity.schedule is None
        assert entity.year == 0
        assert entity.exams == []
        assert entity.course is None

    def test_unknown_field_is_ignored(self):
        entity = make_class()
        before = entity.model_dump()
        patch_class(entity, {"unknownField": 1, "another": "x"})
        assert entity.model_dump() == before

    def test_id_is_read_only(self):
        entity = make_class()
        patch_class(entity, {"id": "hijacked"})
        assert entity.id == "c1"

    def test_none_target_or_map_is_noop(self):
        patch_class(None, {"year": 2026})
        entity = make_class()
        patch_class(entity, None)
        assert entity.year == 2025


class TestNestedValues:
    def test_course_is_replaced_not_merged(self):
        entity = make_class()
        patch_class(entity, {"course": {"id": "course-b"}})
        assert entity.course == Course(id="course-b")

    def test_exam_list_is_replaced(self):
        entity = make_class()
        patch_class(
            entity,
            {"exams": [{"id": "e9", "name": "Final", "weight": 60}]},
        )
        assert [e.id for e in entity.exams] == ["e9"]
        assert entity.exams[0].weight == 60

    def test_duplicate_ids_in_list_are_rejected(self):
        entity = make_class()
        patch_class(entity, {"exams": [{"id": "x"}, {"id": "x"}]})
        assert [e.id for e in entity.exams] == ["e1"]

    def test_list_with_non_object_items_is_skipped(self):
        entity = make_class()
        patch_class(entity, {"students": ["s2"]})
        assert [s.id for s in entity.students] == ["s1"]


class Shift(enum.Enum):
    MORNING = 1
    EVENING = 2


class _Slot:
    shift = Shift.MORNING


class TestEnumFields:
    schema = PatchSchema(FieldSpec("shift", enum_coercer(Shift)))

    def test_member_name_matches_case_insensitively(self):
        slot = _Slot()
        apply_patch(slot, {"Shift": "evening"}, self.schema)
        assert slot.shift is Shift.EVENING

    def test_unknown_member_is_skipped(self):
        slot = _Slot()
        apply_patch(slot, {"shift": "afternoon"}, self.schema)
        assert slot.shift is Shift.MORNING

    @pytest.mark.parametrize("raw", [{"a": 1}, ["EVENING"]])
    def test_structured_values_are_skipped(self, raw):
        slot = _Slot()
        apply_patch(slot, {"shift": raw}, self.schema)
        assert slot.shift is Shift.MORNING
