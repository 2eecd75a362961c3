from sqlalchemy import Column, Integer, String, Date
from database.db import Base

class Semester(Base):
    __tablename__ = "semesters"  # 학기 정보 테이블

    id = Column(Integer, primary_key=True, index=True)         # 학기 고유 ID (PK)
    name = Column(String(50), nullable=False)                  # 학기 이름 (예: 2025-1학기)
    academic_year = Column(String(20), nullable=False)         # 학년도 (예: 2025-2026)
    start_date = Column(Date, nullable=False)                  # 시작일
    end_date = Column(Date, nullable=False)                    # 종료일
