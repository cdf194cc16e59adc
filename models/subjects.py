from sqlalchemy import Column, String, JSON
from database import Base


# One row per class, ordered subject names
class SubjectCatalog(Base):
    __tablename__ = "subjects"

    class_name = Column("class", String(50), primary_key=True)
    subjects = Column(JSON, default=list)
