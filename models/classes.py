from sqlalchemy import Column, Integer, String
from database.db import Base

class Class(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)      # 학급 고유 ID (PK)
    name = Column(String(50), nullable=False)               # 학급 이름 (예: 3-2)
    grade_level = Column(Integer, nullable=False)           # 학년 (예: 1학년, 2학년 등)
    capacity = Column(Integer, nullable=False, default=30)  # 정원
    room = Column(String(50))                               # 교실
