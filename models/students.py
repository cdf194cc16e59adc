from sqlalchemy import Column, String, DateTime
from database import Base
from datetime import datetime


class Student(Base):
    __tablename__ = "students"

    # Column names are the storage contract (camelCase), attributes stay pythonic
    id = Column(String(50), primary_key=True, index=True)
    roll = Column(String(20), nullable=False)
    name = Column(String(100), nullable=False)

    # --- PARENTS INFO ---
    father_name = Column("fatherName", String(100), default="")
    mother_name = Column("motherName", String(100), default="")
    village = Column(String(100), default="")
    mobile = Column(String(20), default="")

    # --- PLACEMENT ---
    student_class = Column("studentClass", String(50), nullable=False, index=True)
    year = Column(String(10), nullable=False, index=True)

    # Roster order (ties in ranking keep this order)
    created_at = Column(DateTime, default=datetime.now)
