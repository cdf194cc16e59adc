from enum import Enum
from pydantic import Field
from typing import List, Optional

from schemas.base import CamelModel
from schemas.students import StudentRecord


class SearchState(str, Enum):
    FOUND = "FOUND"
    NO_RESULT = "NO_RESULT"       # student exists, nothing published for the scope
    NOT_FOUND = "NOT_FOUND"       # no student with that roll in class/year


class SubjectLine(CamelModel):
    subject: str
    current: float
    grade: str
    # Annual view only
    term1: Optional[float] = None
    term2: Optional[float] = None
    average: Optional[float] = None


class MarksheetTotals(CamelModel):
    current: float
    term1: Optional[float] = None
    term2: Optional[float] = None
    composite: Optional[float] = None


class IndividualMarksheet(CamelModel):
    student: StudentRecord
    class_name: str = Field(alias="class")
    year: str
    exam_name: str
    is_annual: bool
    subjects: List[SubjectLine]
    totals: MarksheetTotals
    grade: str
    rank: Optional[int] = None


class BatchRow(CamelModel):
    student_id: str
    roll: str
    name: str
    subjects: List[SubjectLine]
    totals: MarksheetTotals
    grade: str
    rank: Optional[int] = None


class BatchMarksheet(CamelModel):
    class_name: str = Field(alias="class")
    year: str
    exam_name: str
    is_annual: bool
    subjects: List[str]
    rows: List[BatchRow]


class MarksheetSearch(CamelModel):
    state: SearchState
    message: str = ""
    marksheet: Optional[IndividualMarksheet] = None


class RankResponse(CamelModel):
    student_id: str
    rank: Optional[int] = None
    score: Optional[float] = None
