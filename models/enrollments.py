from datetime import date

from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from database.db import Base

from models.students import Student as StudentModel
from models.classes import Class as ClassModel

ENROLLMENT_ACTIVE = "ACTIVE"
ENROLLMENT_INACTIVE = "INACTIVE"

# ✅ 학생 ↔ 학급 등록 정보
class Enrollment(Base):
    __tablename__ = "enrollments"

    id = Column(Integer, primary_key=True, index=True)                         # 등록 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)     # 학생 ID (FK)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)        # 학급 ID (FK)
    academic_year = Column(String(20), nullable=False)                         # 학년도
    enrollment_date = Column(Date, nullable=False, default=date.today)         # 등록일
    status = Column(String(20), nullable=False, default=ENROLLMENT_ACTIVE)     # 상태 (ACTIVE / INACTIVE)

    student = relationship(StudentModel, lazy="joined")
    class_ = relationship(ClassModel)
