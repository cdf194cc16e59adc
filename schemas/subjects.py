from pydantic import BaseModel
from typing import List


class SubjectListSchema(BaseModel):
    subjects: List[str]


class SubjectAddSchema(BaseModel):
    subject: str
