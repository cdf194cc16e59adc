from typing import Dict, List, NamedTuple, Optional

from services.composite import exam_totals
from services.exams import is_annual
from services.lookup import find_result
from services.snapshot import Snapshot


class RankEntry(NamedTuple):
    student_id: str
    score: float


def rank_score(snapshot: Snapshot, student_id: str, class_name: str, year: str, exam_name: str) -> Optional[float]:
    """
    Ranking score of one student, None when the student does not take part.

    Annual exam: the composite of the three exams (2 decimals, as printed),
    only with a published annual result. Any other exam: that exam's stored
    total.
    """
    if is_annual(exam_name):
        totals = exam_totals(snapshot, student_id, class_name, year)
        return round(totals.average, 2) if totals.has_annual else None
    result = find_result(snapshot, student_id, class_name, year, exam_name)
    return result.total_marks if result else None


def rank_class(snapshot: Snapshot, class_name: str, year: str, exam_name: str) -> List[RankEntry]:
    """Students of class/year with a qualifying published result, best first. Equal scores keep roster order."""
    entries = []
    for student in snapshot.roster(class_name, year):
        score = rank_score(snapshot, student.id, class_name, year, exam_name)
        if score is not None:
            entries.append(RankEntry(student.id, score))

    # list.sort is stable, reverse=True included
    entries.sort(key=lambda entry: entry.score, reverse=True)
    return entries


def rank_positions(ranking: List[RankEntry]) -> Dict[str, int]:
    positions = {}
    for index, entry in enumerate(ranking, start=1):
        positions.setdefault(entry.student_id, index)
    return positions


def get_rank(snapshot: Snapshot, student_id: str, class_name: str, year: str, exam_name: str) -> Optional[int]:
    """1-based position in the class ranking, None when the student is not ranked."""
    return rank_positions(rank_class(snapshot, class_name, year, exam_name)).get(student_id)
