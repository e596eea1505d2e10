from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.enums import Weekday
from ..core.exceptions import NotFoundError, ValidationError
from .model import SchoolClass, TimeSlot
from .repository import ClassRepository

logger = logging.getLogger(__name__)

_TEXT_FIELDS = (
    ("class_name", "className", "Class name"),
    ("subject_code", "subjectCode", "Subject code"),
    ("course", "course", "Course"),
    ("room", "room", "Room"),
    ("year_section", "yearSection", "Year/section"),
)


def _pick(data: Mapping[str, Any], snake: str, camel: str):
    return data[snake] if snake in data else data.get(camel)


def _parse_slots(raw) -> tuple[TimeSlot, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("schedules must be a list of time slots")
    return tuple(TimeSlot.from_dict(s) for s in raw)


class ClassService:
    """Use case: class definitions and their weekly schedules."""

    def __init__(self, classes: ClassRepository):
        self._classes = classes

    def get(self, class_id: int) -> SchoolClass:
        found = self._classes.get_by_id(class_id)
        if not found:
            raise NotFoundError("Class not found")
        return found

    def list_all(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    def list_for_instructor(self, instructor_code: str) -> Sequence[SchoolClass]:
        return self._classes.list_for_instructor(instructor_code)

    def classes_meeting_on(self, class_ids: Sequence[int], day: date) -> list[SchoolClass]:
        weekday = Weekday.from_date_weekday(day.weekday())
        if weekday is None:
            return []
        return [c for c in self._classes.list_by_ids(class_ids) if c.meets_on(weekday)]

    def create(self, data: Mapping[str, Any], *, default_instructor: Optional[str] = None) -> SchoolClass:
        values = {snake: require_non_empty(_pick(data, snake, camel), label) for snake, camel, label in _TEXT_FIELDS}
        instructor_code = _pick(data, "instructor_code", "instructorId") or default_instructor
        class_id = self._classes.create(
            **values,
            schedules=_parse_slots(data.get("schedules")),
            instructor_code=instructor_code,
        )
        logger.info("class %s created (%s %s)", class_id, values["subject_code"], values["year_section"])
        return self.get(class_id)

    def update(self, class_id: int, data: Mapping[str, Any]) -> SchoolClass:
        current = self.get(class_id)

        values: dict[str, Any] = {}
        for snake, camel, label in _TEXT_FIELDS:
            raw = _pick(data, snake, camel)
            values[snake] = require_non_empty(raw, label) if raw is not None else getattr(current, snake)

        schedules = _parse_slots(data["schedules"]) if "schedules" in data else current.schedules
        instructor_code = _pick(data, "instructor_code", "instructorId")
        if instructor_code is None:
            instructor_code = current.instructor_code

        self._classes.update(class_id=current.class_id, schedules=schedules, instructor_code=instructor_code, **values)
        return self.get(current.class_id)

    def delete(self, class_id: int) -> None:
        if not self._classes.delete(class_id):
            raise NotFoundError("Class not found")
        logger.info("class %s deleted", class_id)
