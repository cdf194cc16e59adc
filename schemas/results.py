from pydantic import ConfigDict, Field, field_validator
from typing import Dict, List, Optional, Tuple

from schemas.base import CamelModel


class SubjectMark(CamelModel):
    subject_name: str
    marks: float

    model_config = ConfigDict(frozen=True)


# Validated snapshot entity (read side)
class ResultRecord(CamelModel):
    id: str
    student_id: str
    exam_name: str
    class_name: str = Field(alias="class")
    year: str
    marks: Tuple[SubjectMark, ...] = ()
    total_marks: float
    grade: str = "-"
    is_published: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("marks", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return () if value is None else value

    @field_validator("grade", mode="before")
    @classmethod
    def default_grade(cls, value):
        return "-" if value is None else value

    def mark_for(self, subject: str) -> float:
        """Marks for one subject, 0 when the subject was not entered."""
        for item in self.marks:
            if item.subject_name == subject:
                return item.marks
        return 0.0


# ===========================
#      RESULT ENTRY
# ===========================
class ResultEntrySchema(CamelModel):
    student_id: str
    class_name: str = Field(alias="class")
    year: str
    exam_name: str
    marks: Dict[str, float] = {}


class StudentMarksSchema(CamelModel):
    student_id: str
    marks: Dict[str, float] = {}


# Manage tab: edit marks of one stored result
class ResultEditSchema(CamelModel):
    marks: Dict[str, float]


class BulkResultEntrySchema(CamelModel):
    class_name: str = Field(alias="class")
    year: str
    exam_name: str
    entries: List[StudentMarksSchema]


class PublishSchema(CamelModel):
    publish: bool


class BulkPublishSchema(CamelModel):
    class_name: str = Field(alias="class")
    year: str
    exam_name: str
    publish: bool
    search: Optional[str] = ""


class ManagedResultSchema(CamelModel):
    result: ResultRecord
    roll: str
    name: str
