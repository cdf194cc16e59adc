from dataclasses import dataclass

from services.exams import ExamKind
from services.lookup import find_result
from services.snapshot import Snapshot

# Missing exams count as zero, the divisor never shrinks
EXAM_COUNT = 3


@dataclass(frozen=True)
class ExamTotals:
    term1: float
    term2: float
    annual: float
    has_annual: bool

    @property
    def grand_total(self) -> float:
        return self.term1 + self.term2 + self.annual

    @property
    def average(self) -> float:
        return self.grand_total / EXAM_COUNT


def _total(snapshot, student_id, class_name, year, kind: ExamKind) -> float:
    result = find_result(snapshot, student_id, class_name, year, kind.exam_name)
    return result.total_marks if result else 0.0


def exam_totals(snapshot: Snapshot, student_id: str, class_name: str, year: str) -> ExamTotals:
    """Stored totals of the three exams of the year, zero-filled."""
    annual = find_result(snapshot, student_id, class_name, year, ExamKind.ANNUAL.exam_name)
    return ExamTotals(
        term1=_total(snapshot, student_id, class_name, year, ExamKind.TERM1),
        term2=_total(snapshot, student_id, class_name, year, ExamKind.TERM2),
        annual=annual.total_marks if annual else 0.0,
        has_annual=annual is not None,
    )


def composite_total(snapshot: Snapshot, student_id: str, class_name: str, year: str) -> float:
    return exam_totals(snapshot, student_id, class_name, year).average


def subject_marks_by_exam(snapshot: Snapshot, student_id: str, class_name: str, year: str, subject: str):
    """(term1, term2, annual) marks for one subject, 0 where the exam or subject is missing."""
    marks = []
    for kind in ExamKind:
        result = find_result(snapshot, student_id, class_name, year, kind.exam_name)
        marks.append(result.mark_for(subject) if result else 0.0)
    return tuple(marks)


def subject_composite(snapshot: Snapshot, student_id: str, class_name: str, year: str, subject: str) -> float:
    return sum(subject_marks_by_exam(snapshot, student_id, class_name, year, subject)) / EXAM_COUNT
