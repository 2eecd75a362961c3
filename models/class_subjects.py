from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database.db import Base

# ✅ 외래키 관계 대상 모델 import
from models.classes import Class as ClassModel
from models.subjects import Subject as SubjectModel
from models.semesters import Semester as SemesterModel
from models.teachers import Teacher as TeacherModel

# ✅ 학급별 개설 과목 (학급 × 과목 × 담당교사 × 학기)
class ClassSubject(Base):
    __tablename__ = "class_subjects"
    __table_args__ = (
        UniqueConstraint("class_id", "subject_id", "semester_id", name="uq_class_subject_semester"),
    )

    id = Column(Integer, primary_key=True, index=True)                         # 개설 과목 고유 ID (PK)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)        # 학급 ID (FK)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)     # 과목 ID (FK)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)     # 담당 교사 ID (FK)
    semester_id = Column(Integer, ForeignKey("semesters.id"), nullable=False)   # 학기 ID (FK)

    # ✅ 관계 설정 (N:1)
    class_ = relationship(ClassModel, lazy="joined")
    subject = relationship(SubjectModel, lazy="joined")
    teacher = relationship(TeacherModel, lazy="joined")
    semester = relationship(SemesterModel, lazy="joined")
