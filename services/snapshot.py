"""
Immutable, validated view of the record store.

Rows arrive from the store as loose dictionaries. They are parsed into
StudentRecord / ResultRecord here; rows that fail validation are logged and
left out so nothing downstream does arithmetic on missing values.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from schemas.results import ResultRecord
from schemas.students import StudentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    students: Tuple[StudentRecord, ...] = ()
    results: Tuple[ResultRecord, ...] = ()
    subjects: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))

    def roster(self, class_name: str, year: str) -> List[StudentRecord]:
        return [s for s in self.students if s.student_class == class_name and s.year == year]

    def subjects_for(self, class_name: str) -> Tuple[str, ...]:
        # A class without a catalog renders with no subject rows
        return self.subjects.get(class_name, ())

    def student(self, student_id: str) -> Optional[StudentRecord]:
        return next((s for s in self.students if s.id == student_id), None)


def _parse(model, rows: Iterable[dict], kind: str) -> list:
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning("Quarantined malformed %s record %r: %s", kind, row.get("id"), e.errors())
    return parsed


def build_snapshot(
    student_rows: Iterable[dict] = (),
    result_rows: Iterable[dict] = (),
    catalog_rows: Iterable[dict] = (),
) -> Snapshot:
    students = _parse(StudentRecord, student_rows, "student")
    results = _parse(ResultRecord, result_rows, "result")

    catalog = {}
    for row in catalog_rows:
        class_name = row.get("class")
        subjects = row.get("subjects") or []
        if not class_name or not isinstance(subjects, (list, tuple)):
            logger.warning("Quarantined malformed subject catalog row for class %r", class_name)
            continue
        catalog[class_name] = tuple(str(s) for s in subjects)

    return Snapshot(
        students=tuple(students),
        results=tuple(results),
        subjects=MappingProxyType(catalog),
    )
