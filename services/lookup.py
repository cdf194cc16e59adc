from typing import Optional

from schemas.results import ResultRecord
from schemas.students import StudentRecord
from services.snapshot import Snapshot


def find_result(
    snapshot: Snapshot, student_id: str, class_name: str, year: str, exam_name: str
) -> Optional[ResultRecord]:
    """
    Published result for one (student, class, year, exam), or None.

    Exam names are hand-typed upstream, so both sides are trimmed. If the
    store holds duplicates for the same tuple the first one in snapshot
    order wins; the write path is expected to prevent duplicates.
    """
    wanted = (exam_name or "").strip()
    for result in snapshot.results:
        if not result.is_published:
            continue
        if (
            result.student_id == student_id
            and result.class_name == class_name
            and result.year == year
            and result.exam_name.strip() == wanted
        ):
            return result
    return None


def find_student_by_roll(
    snapshot: Snapshot, roll: str, class_name: str, year: str
) -> Optional[StudentRecord]:
    wanted = str(roll).strip()
    if not wanted:
        return None
    for student in snapshot.roster(class_name, year):
        if student.roll == wanted:
            return student
    return None
