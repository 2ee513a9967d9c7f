"""
Class Service — Partial Update Resolver
========================================

What:  Applies a PATCH body (field name → raw JSON value) onto an existing
       entity instance, in place.
How:   Each patchable entity type declares a PatchSchema: an explicit table of
       field name → (attribute, coercer, null value). Keys are matched
       case-insensitively, ignoring underscores, so `Year`, `year`,
       `classNumber` and `class_number` all resolve.

Per-field rules (evaluated for every entry of the map):
    unknown or read-only name      → skipped
    JSON null                      → attribute reset to its null/zero value
    nested model field + object    → validated into the model, assigned whole
    list-of-model field + array    → validated into models, assigned whole
    enum field                     → matched against member names
    scalar field                   → best-effort conversion

A failed conversion skips that one field; the attribute keeps its previous
value and the remaining entries are still applied. Nothing is raised to the
caller.

Nested objects are never merged: `{"course": {"id": "x"}}` replaces the
whole course.
"""

import enum
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

from pydantic import BaseModel, TypeAdapter

from class_service.models import AcademicClass, Course, Exam, Professor, Student
from class_service.models.classes import INT32_MAX, INT32_MIN

logger = logging.getLogger(__name__)

Coercer = Callable[[Any], Any]

_datetime_adapter = TypeAdapter(datetime)


def normalize_field_name(name: str) -> str:
    return name.replace("_", "").replace("-", "").strip().lower()


# ══════════════════════════════════════════════════════════════════════════
# Coercers
# ══════════════════════════════════════════════════════════════════════════
# Each coercer returns the converted value or raises ValueError/TypeError.

def coerce_str(raw: Any) -> str:
    if isinstance(raw, (dict, list)):
        raise TypeError(f"cannot convert {type(raw).__name__} to str")
    return raw if isinstance(raw, str) else str(raw)


def coerce_int(raw: Any) -> int:
    """Convert to int; values outside the signed 32-bit range are rejected."""
    if isinstance(raw, bool):
        value = int(raw)
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not raw.is_integer():
            raise ValueError(f"{raw!r} is not an integral number")
        value = int(raw)
    elif isinstance(raw, str):
        value = int(raw.strip())
    else:
        raise TypeError(f"cannot convert {type(raw).__name__} to int")
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"{value} is outside the 32-bit integer range")
    return value


def coerce_datetime(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str):
        return _datetime_adapter.validate_python(raw.strip())
    raise TypeError(f"cannot convert {type(raw).__name__} to datetime")


def enum_coercer(enum_type: Type[enum.Enum]) -> Coercer:
    """Match the value's string form against member names, ignoring case."""
    members = {member.name.lower(): member for member in enum_type}

    def coerce(raw: Any) -> enum.Enum:
        if isinstance(raw, enum_type):
            return raw
        if isinstance(raw, (dict, list)):
            raise TypeError(f"cannot convert {type(raw).__name__} to {enum_type.__name__}")
        member = members.get(str(raw).strip().lower())
        if member is None:
            raise ValueError(f"{raw!r} is not a valid {enum_type.__name__}")
        return member

    return coerce


def model_coercer(model_type: Type[BaseModel]) -> Coercer:
    """Deserialize a JSON object into a fresh model instance."""

    def coerce(raw: Any) -> BaseModel:
        if not isinstance(raw, dict):
            raise TypeError(f"{model_type.__name__} requires an object")
        return model_type.model_validate(raw)

    return coerce


def list_coercer(model_type: Type[BaseModel], unique_ids: bool = True) -> Coercer:
    """
    Deserialize a JSON array of objects. With unique_ids, two items sharing
    a non-empty `id` make the whole value invalid.
    """
    item_coercer = model_coercer(model_type)

    def coerce(raw: Any) -> List[BaseModel]:
        if not isinstance(raw, list):
            raise TypeError(f"list of {model_type.__name__} requires an array")
        items = [item_coercer(item) for item in raw]
        if unique_ids:
            seen = set()
            for item in items:
                item_id = getattr(item, "id", None)
                if not item_id:
                    continue
                if item_id in seen:
                    raise ValueError(f"duplicate {model_type.__name__} id '{item_id}'")
                seen.add(item_id)
        return items

    return coerce


# ══════════════════════════════════════════════════════════════════════════
# Schema
# ══════════════════════════════════════════════════════════════════════════

class FieldSpec:
    """
    One writable field of a patch schema.

    Args:
        attribute:    Python attribute set on the target
        coerce:       Converts the raw JSON value; raises on failure
        null_factory: Produces the value stored for JSON null
        aliases:      Extra accepted names besides the attribute itself
    """

    def __init__(
        self,
        attribute: str,
        coerce: Coercer,
        null_factory: Callable[[], Any] = lambda: None,
        aliases: Iterable[str] = (),
    ):
        self.attribute = attribute
        self.coerce = coerce
        self.null_factory = null_factory
        self.names = [attribute, *aliases]


class PatchSchema:
    """Lookup table from normalized field name to FieldSpec."""

    def __init__(self, *fields: FieldSpec):
        self._fields: Dict[str, FieldSpec] = {}
        for spec in fields:
            for name in spec.names:
                self._fields[normalize_field_name(name)] = spec

    def resolve(self, name: Any) -> Optional[FieldSpec]:
        if not isinstance(name, str):
            return None
        return self._fields.get(normalize_field_name(name))


def apply_patch(target: Any, updates: Optional[Mapping[str, Any]], schema: PatchSchema) -> None:
    """
    Mutate `target` with every applicable entry of `updates`.

    A None target or None map is a no-op. Never raises for per-field
    problems; skipped entries are logged at DEBUG.
    """
    if target is None or updates is None:
        return

    for key, raw in updates.items():
        spec = schema.resolve(key)
        if spec is None:
            logger.debug("Patch skipped unknown field %r on %s", key, type(target).__name__)
            continue

        if raw is None:
            setattr(target, spec.attribute, spec.null_factory())
            continue

        try:
            value = spec.coerce(raw)
        except (ValueError, TypeError) as e:
            # pydantic's ValidationError is a ValueError
            logger.debug("Patch skipped field %r: %s", key, e)
            continue
        setattr(target, spec.attribute, value)


# Identifiers are not listed: they are read-only once assigned.
CLASS_PATCH_SCHEMA = PatchSchema(
    FieldSpec("class_number", coerce_str),
    FieldSpec("year", coerce_int, null_factory=int),
    FieldSpec("semester", coerce_int, null_factory=int),
    FieldSpec("schedule", coerce_str),
    FieldSpec("exams", list_coercer(Exam), null_factory=list),
    FieldSpec("students", list_coercer(Student), null_factory=list),
    FieldSpec("professors", list_coercer(Professor), null_factory=list),
    FieldSpec("course", model_coercer(Course)),
)

EXAM_PATCH_SCHEMA = PatchSchema(
    FieldSpec("name", coerce_str),
    FieldSpec("date", coerce_datetime),
    FieldSpec("weight", coerce_int, null_factory=int),
)


def patch_class(target: Optional[AcademicClass], updates: Optional[Mapping[str, Any]]) -> None:
    apply_patch(target, updates, CLASS_PATCH_SCHEMA)


def patch_exam(target: Optional[Exam], updates: Optional[Mapping[str, Any]]) -> None:
    apply_patch(target, updates, EXAM_PATCH_SCHEMA)
