def grade_for_marks(marks: float) -> str:
    if marks >= 80: return "A+"
    elif marks >= 70: return "A"
    elif marks >= 60: return "A-"
    elif marks >= 50: return "B"
    elif marks >= 40: return "C"
    elif marks >= 33: return "D"
    else: return "F"


def calculate_grade(total: float, subject_count: int) -> str:
    """Grade stored on a result: average marks per subject mapped to a letter."""
    if subject_count == 0:
        return "-"
    return grade_for_marks(total / subject_count)
