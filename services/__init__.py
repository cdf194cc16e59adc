from services.composite import composite_total, exam_totals, subject_composite
from services.lookup import find_result, find_student_by_roll
from services.marksheet import build_batch_marksheet, build_individual_marksheet, search_marksheet
from services.ranking import get_rank, rank_class
from services.snapshot import Snapshot, build_snapshot

__all__ = [
    "Snapshot",
    "build_snapshot",
    "find_result",
    "find_student_by_roll",
    "composite_total",
    "exam_totals",
    "subject_composite",
    "rank_class",
    "get_rank",
    "build_individual_marksheet",
    "build_batch_marksheet",
    "search_marksheet",
]
