from sqlalchemy import Column, String, ForeignKey, Float, Boolean, DateTime, JSON
from database import Base
from datetime import datetime


class Result(Base):
    __tablename__ = "results"

    id = Column(String(200), primary_key=True, index=True)
    student_id = Column("studentId", String(50), ForeignKey("students.id"), index=True)
    exam_name = Column("examName", String(100))   # Example: "বার্ষিক পরীক্ষা"
    class_name = Column("class", String(50))
    year = Column(String(10))

    # [{"subjectName": "গণিত", "marks": 78}, ...]
    marks = Column(JSON, default=list)
    total_marks = Column("totalMarks", Float, default=0.0)   # stored sum, never re-derived by views
    grade = Column(String(5), default="-")
    is_published = Column("isPublished", Boolean, default=False)

    created_at = Column(DateTime, default=datetime.now)
