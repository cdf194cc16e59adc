import io
from typing import Dict, Iterable

import pandas as pd

from models.results import Result
from models.students import Student

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def students_frame(students: Iterable[Student]) -> pd.DataFrame:
    rows = [
        {
            "রোল": s.roll,
            "নাম": s.name,
            "পিতার নাম": s.father_name,
            "মাতার নাম": s.mother_name,
            "গ্রাম": s.village,
            "মোবাইল": s.mobile,
            "শ্রেণী": s.student_class,
            "সাল": s.year,
        }
        for s in students
    ]
    return pd.DataFrame(rows)


def results_frame(results: Iterable[Result], students: Dict[str, Student]) -> pd.DataFrame:
    rows = []
    for r in results:
        s = students.get(r.student_id)
        row = {
            "রোল": s.roll if s else "",
            "নাম": s.name if s else "",
            "মোট নম্বর": r.total_marks,
            "গ্রেড": r.grade,
            "স্ট্যাটাস": "পাবলিশড" if r.is_published else "বন্ধ",
        }
        for m in r.marks or []:
            row[m.get("subjectName")] = m.get("marks")
        rows.append(row)
    return pd.DataFrame(rows)


def to_xlsx(frame: pd.DataFrame) -> io.BytesIO:
    buffer = io.BytesIO()
    frame.to_excel(buffer, index=False, engine="openpyxl")
    buffer.seek(0)
    return buffer
