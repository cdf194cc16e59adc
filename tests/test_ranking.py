from factories import ANNUAL, CLASS, TERM1, TERM2, YEAR, make_snapshot, result_row, student_row
from services.ranking import RankEntry, get_rank, rank_class, rank_score


def _three_exams(student_id, total):
    return [result_row(student_id, exam, total=total) for exam in (TERM1, TERM2, ANNUAL)]


def test_students_without_annual_result_are_not_ranked():
    snapshot = make_snapshot(
        students=[student_row("a", "1"), student_row("b", "2"), student_row("c", "3")],
        results=_three_exams("a", 90)
        + [result_row("b", TERM1, total=99), result_row("b", TERM2, total=99)]
        + _three_exams("c", 70),
    )
    assert rank_class(snapshot, CLASS, YEAR, ANNUAL) == [RankEntry("a", 90.0), RankEntry("c", 70.0)]
    assert get_rank(snapshot, "b", CLASS, YEAR, ANNUAL) is None


def test_ties_keep_roster_order():
    snapshot = make_snapshot(
        students=[student_row("2", "5", name="Zeta"), student_row("1", "1", name="Alpha")],
        results=_three_exams("1", 85) + _three_exams("2", 85),
    )
    ranking = rank_class(snapshot, CLASS, YEAR, ANNUAL)
    assert [entry.student_id for entry in ranking] == ["2", "1"]
    assert get_rank(snapshot, "2", CLASS, YEAR, ANNUAL) == 1
    assert get_rank(snapshot, "1", CLASS, YEAR, ANNUAL) == 2


def test_term_exam_ranks_by_stored_total():
    snapshot = make_snapshot(
        students=[
            student_row("a", "1"),
            student_row("b", "2"),
            student_row("c", "3"),
            student_row("d", "4", class_name="দ্বিতীয়"),
        ],
        results=[
            result_row("a", TERM1, total=60),
            result_row("b", TERM1, total=75),
            result_row("c", TERM1, total=99, published=False),
            result_row("d", TERM1, total=100, class_name="দ্বিতীয়"),
        ],
    )
    assert rank_class(snapshot, CLASS, YEAR, TERM1) == [RankEntry("b", 75), RankEntry("a", 60)]


def test_annual_score_is_rounded_composite():
    snapshot = make_snapshot(
        students=[student_row("a", "1")],
        results=[result_row("a", ANNUAL, total=100)],
    )
    assert rank_class(snapshot, CLASS, YEAR, ANNUAL) == [RankEntry("a", 33.33)]


def test_rank_is_recomputed_from_current_snapshot():
    students = [student_row("a", "1"), student_row("b", "2")]
    before = make_snapshot(students=students, results=[result_row("a", TERM1, total=50)])
    after = make_snapshot(students=students, results=[
        result_row("a", TERM1, total=50),
        result_row("b", TERM1, total=70),
    ])
    assert get_rank(before, "a", CLASS, YEAR, TERM1) == 1
    assert get_rank(after, "a", CLASS, YEAR, TERM1) == 2


def test_rank_score_matches_ranking_entries():
    snapshot = make_snapshot(
        students=[student_row("a", "1"), student_row("b", "2")],
        results=[result_row("a", TERM1, total=50), result_row("a", TERM2, total=50), result_row("a", ANNUAL, total=51)]
        + [result_row("b", TERM1, total=60)],
    )
    assert rank_score(snapshot, "a", CLASS, YEAR, ANNUAL) == 50.33
    assert rank_score(snapshot, "b", CLASS, YEAR, ANNUAL) is None
    assert rank_score(snapshot, "b", CLASS, YEAR, TERM1) == 60
    assert rank_score(snapshot, "b", CLASS, YEAR, TERM2) is None
