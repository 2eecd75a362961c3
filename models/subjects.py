from sqlalchemy import Column, Integer, String
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # 과목 정보 테이블

    id = Column(Integer, primary_key=True, index=True)         # 과목 고유 ID (Primary Key)
    name = Column(String(100), nullable=False)                # 과목 이름 (예: 수학, 영어)
    code = Column(String(20), unique=True, nullable=False)    # 과목 코드 (예: MATH101)
    description = Column(String(255))                        # 과목 설명
    credits = Column(Integer, nullable=False, default=1)      # 학점
