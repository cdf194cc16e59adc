from enum import Enum
from typing import Optional

from config import Config


class ExamKind(str, Enum):
    TERM1 = "term1"
    TERM2 = "term2"
    ANNUAL = "annual"

    @property
    def exam_name(self) -> str:
        """Display name as stored in results (configured, Bengali by default)."""
        return Config.EXAM_NAMES[list(ExamKind).index(self)]

    @classmethod
    def from_name(cls, exam_name: Optional[str]) -> Optional["ExamKind"]:
        wanted = (exam_name or "").strip()
        for kind in cls:
            if kind.exam_name.strip() == wanted:
                return kind
        return None


def is_annual(exam_name: Optional[str]) -> bool:
    return ExamKind.from_name(exam_name) is ExamKind.ANNUAL
