"""
Mark-sheet views: one student's sheet and the class-wide merit list.

Totals always come from the stored `totalMarks` of each result; subject
marks are only used for the per-subject rows.
"""

from typing import Dict, List, Optional

from schemas.marksheet import (
    BatchMarksheet,
    BatchRow,
    IndividualMarksheet,
    MarksheetSearch,
    MarksheetTotals,
    SearchState,
    SubjectLine,
)
from schemas.students import StudentRecord
from services.composite import composite_total, exam_totals, subject_composite, subject_marks_by_exam
from services.exams import is_annual
from services.grading import grade_for_marks
from services.lookup import find_result, find_student_by_roll
from services.ranking import get_rank, rank_class, rank_positions
from services.snapshot import Snapshot

NOT_FOUND_MESSAGE = "Student not found. Please check the roll, class and year."
NOT_PUBLISHED_MESSAGE = "Results have not been published yet. Please check back later."

SORT_BY_ROLL = "roll"
SORT_BY_RANK = "rank"


def roll_sort_key(roll: str):
    """Numeric roll order; int() also reads Bengali digits. Non-numeric rolls go last."""
    try:
        return (0, int(roll.strip()))
    except ValueError:
        return (1, 0)


def _subject_lines(snapshot, student_id, class_name, year, current, annual) -> List[SubjectLine]:
    if not annual:
        return [
            SubjectLine(subject=subject, current=current.mark_for(subject), grade=grade_for_marks(current.mark_for(subject)))
            for subject in snapshot.subjects_for(class_name)
        ]

    lines = []
    for subject in snapshot.subjects_for(class_name):
        t1, t2, _ = subject_marks_by_exam(snapshot, student_id, class_name, year, subject)
        now = current.mark_for(subject)
        lines.append(SubjectLine(
            subject=subject,
            term1=t1,
            term2=t2,
            current=now,
            average=round(subject_composite(snapshot, student_id, class_name, year, subject), 2),
            grade=grade_for_marks(now),
        ))
    return lines


def _totals(snapshot, student_id, class_name, year, current, annual) -> MarksheetTotals:
    if not annual:
        return MarksheetTotals(current=current.total_marks)
    totals = exam_totals(snapshot, student_id, class_name, year)
    return MarksheetTotals(
        term1=totals.term1,
        term2=totals.term2,
        current=current.total_marks,
        composite=round(composite_total(snapshot, student_id, class_name, year), 2),
    )


def build_individual_marksheet(
    snapshot: Snapshot,
    student: StudentRecord,
    class_name: str,
    year: str,
    exam_name: str,
    positions: Optional[Dict[str, int]] = None,
) -> Optional[IndividualMarksheet]:
    """
    Mark-sheet for one student, or None when nothing is published for the scope.

    `positions` lets batch callers reuse one ranking instead of recomputing it.
    """
    current = find_result(snapshot, student.id, class_name, year, exam_name)
    if current is None:
        return None

    annual = is_annual(exam_name)
    if positions is None:
        rank = get_rank(snapshot, student.id, class_name, year, exam_name)
    else:
        rank = positions.get(student.id)

    return IndividualMarksheet(
        student=student,
        class_name=class_name,
        year=year,
        exam_name=exam_name.strip(),
        is_annual=annual,
        subjects=_subject_lines(snapshot, student.id, class_name, year, current, annual),
        totals=_totals(snapshot, student.id, class_name, year, current, annual),
        grade=current.grade,
        rank=rank,
    )


def build_batch_marksheet(
    snapshot: Snapshot, class_name: str, year: str, exam_name: str, sort_by: str = SORT_BY_ROLL
) -> BatchMarksheet:
    """
    Merit list for class/year/exam.

    Scope first, then result existence (students without a published result
    are left out, not shown as zero rows), then sort.
    """
    positions = rank_positions(rank_class(snapshot, class_name, year, exam_name))

    rows = []
    for student in snapshot.roster(class_name, year):
        sheet = build_individual_marksheet(snapshot, student, class_name, year, exam_name, positions)
        if sheet is None:
            continue
        rows.append(BatchRow(
            student_id=student.id,
            roll=student.roll,
            name=student.name,
            subjects=sheet.subjects,
            totals=sheet.totals,
            grade=sheet.grade,
            rank=sheet.rank,
        ))

    if sort_by == SORT_BY_RANK:
        rows.sort(key=lambda row: (row.rank is None, row.rank or 0))
    else:
        rows.sort(key=lambda row: roll_sort_key(row.roll))

    return BatchMarksheet(
        class_name=class_name,
        year=year,
        exam_name=exam_name.strip(),
        is_annual=is_annual(exam_name),
        subjects=list(snapshot.subjects_for(class_name)),
        rows=rows,
    )


def search_marksheet(snapshot: Snapshot, roll: str, class_name: str, year: str, exam_name: str) -> MarksheetSearch:
    student = find_student_by_roll(snapshot, roll, class_name, year)
    if student is None:
        return MarksheetSearch(state=SearchState.NOT_FOUND, message=NOT_FOUND_MESSAGE)

    sheet = build_individual_marksheet(snapshot, student, class_name, year, exam_name)
    if sheet is None:
        return MarksheetSearch(state=SearchState.NO_RESULT, message=NOT_PUBLISHED_MESSAGE)

    return MarksheetSearch(state=SearchState.FOUND, marksheet=sheet)
