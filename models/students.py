from sqlalchemy import Column, Integer, String, Date
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)               # 고유 학생 ID (Primary Key)
    student_number = Column(String(30), unique=True, nullable=False) # 학번
    first_name = Column(String(100), nullable=False)                 # 이름
    last_name = Column(String(100), nullable=False)                  # 성
    gender = Column(String(10))                                      # 성별
    date_of_birth = Column(Date)                                     # 생년월일
    address = Column(String(200))                                    # 주소
