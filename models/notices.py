from sqlalchemy import Column, String, Text
from database import Base


# Notice Board
class Notice(Base):
    __tablename__ = "notices"

    id = Column(String(50), primary_key=True, index=True)
    text = Column(Text, nullable=False)
    date = Column(String(50), default="")   # display date, already formatted
