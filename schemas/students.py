from pydantic import ConfigDict, Field, field_validator
from typing import Optional

from schemas.base import CamelModel


def _text(value):
    if value is None:
        return ""
    return str(value).strip()


# 1. Validated snapshot entity (read side)
class StudentRecord(CamelModel):
    id: str
    roll: str
    name: str
    father_name: str = ""
    mother_name: str = ""
    village: str = ""
    mobile: str = ""
    student_class: str
    year: str

    model_config = ConfigDict(frozen=True)

    @field_validator("id", "roll", "student_class", "year", mode="before")
    @classmethod
    def required_text(cls, value):
        if value is None or _text(value) == "":
            raise ValueError("must not be empty")
        return _text(value)

    @field_validator("father_name", "mother_name", "village", "mobile", mode="before")
    @classmethod
    def optional_text(cls, value):
        return _text(value)


# 2. Enrollment form
class StudentCreateSchema(CamelModel):
    id: Optional[str] = None
    roll: str = Field(min_length=1)
    name: str = Field(min_length=1)
    father_name: str = ""
    mother_name: str = ""
    village: str = ""
    mobile: str = ""
    student_class: str = Field(min_length=1)
    year: str = Field(min_length=1)

    @field_validator("roll", "name", "student_class", "year", mode="before")
    @classmethod
    def strip_required(cls, value):
        return _text(value)


# 3. Edit form (partial)
class StudentUpdateSchema(CamelModel):
    roll: Optional[str] = None
    name: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    village: Optional[str] = None
    mobile: Optional[str] = None
    student_class: Optional[str] = None
    year: Optional[str] = None

    @field_validator("roll", "name", "student_class", "year", mode="before")
    @classmethod
    def no_blank(cls, value):
        if value is None:
            return None
        value = _text(value)
        if not value:
            raise ValueError("must not be empty")
        return value
