from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from database.db import Base

from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from models.class_subjects import ClassSubject as ClassSubjectModel


def _utcnow():
    return datetime.now(timezone.utc)


# ✅ 평가 점수 기록 테이블 (과제, 퀴즈, 중간, 기말 등)
class Score(Base):
    __tablename__ = "scores"

    id = Column(Integer, primary_key=True, index=True)                                   # 점수 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)   # 학생 ID (FK)
    class_subject_id = Column(Integer, ForeignKey("class_subjects.id"), nullable=False, index=True)  # 개설 과목 ID (FK)
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False)              # 과목 ID (FK)
    score_type = Column(String(20), nullable=False)                                      # 평가 유형 (HOMEWORK, QUIZ ...)
    score = Column(Float, nullable=False)                                                # 취득 점수
    max_score = Column(Float, nullable=False)                                            # 만점
    weight = Column(Float, nullable=False)                                               # 반영 비율 (0~1)
    notes = Column(Text)                                                                 # 비고
    date_recorded = Column(DateTime(timezone=True), nullable=False, default=_utcnow)     # 기록 일시

    # ✅ 관계 설정
    student = relationship(StudentModel, lazy="joined")
    subject = relationship(SubjectModel, lazy="joined")
    class_subject = relationship(ClassSubjectModel, lazy="joined")
