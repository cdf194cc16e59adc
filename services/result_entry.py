import re
from typing import Dict, List, Optional

from models.results import Result
from services.grading import calculate_grade


def result_id_for(student_id: str, class_name: str, exam_name: str, year: str) -> str:
    exam_key = re.sub(r"\s+", "_", exam_name)
    return f"res_{student_id}_{class_name}_{exam_key}_{year}"


def prepare_result(
    student_id: str,
    class_name: str,
    year: str,
    exam_name: str,
    marks_by_subject: Dict[str, float],
    subjects: List[str],
    existing: Optional[Result] = None,
) -> dict:
    """
    Result record ready for upsert.

    Only subjects of the class catalog are kept (missing ones count 0), the
    total and grade are computed here once and stored. An existing record for
    the same tuple keeps its id and publication flag.
    """
    class_name, year, exam_name = class_name.strip(), year.strip(), exam_name.strip()
    subject_marks = [
        {"subjectName": name, "marks": float(marks_by_subject.get(name) or 0)}
        for name in subjects
    ]
    total = sum(item["marks"] for item in subject_marks)
    return {
        "id": existing.id if existing else result_id_for(student_id, class_name, exam_name, year),
        "studentId": student_id,
        "examName": exam_name,
        "class": class_name,
        "year": year,
        "marks": subject_marks,
        "totalMarks": total,
        "grade": calculate_grade(total, len(subjects)),
        "isPublished": bool(existing.is_published) if existing else False,
    }


def edit_result(existing: Result, marks_by_subject: Dict[str, float]) -> dict:
    """
    In-place edit of a stored result.

    Works on the record's own subject list, so subjects later removed from the
    class catalog are kept. Total and grade are recomputed; id and
    publication are unchanged.
    """
    stored = [dict(item) for item in (existing.marks or [])]
    known = {item["subjectName"] for item in stored}
    unknown = [name for name in marks_by_subject if name not in known]
    if unknown:
        raise ValueError(f"Subject not in this result: {', '.join(unknown)}")

    for item in stored:
        if item["subjectName"] in marks_by_subject:
            item["marks"] = float(marks_by_subject[item["subjectName"]] or 0)
    total = sum(float(item["marks"] or 0) for item in stored)
    return {
        "id": existing.id,
        "studentId": existing.student_id,
        "examName": existing.exam_name,
        "class": existing.class_name,
        "year": existing.year,
        "marks": stored,
        "totalMarks": total,
        "grade": calculate_grade(total, len(stored)),
        "isPublished": bool(existing.is_published),
    }
