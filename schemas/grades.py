from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# ✅ 성적표 / 성적부 응답에 함께 내려주는 참조 정보 스키마
# 점수 요약 자체는 services/grade_aggregator.SubjectGradeSummary.to_dict() 사용


class StudentBrief(BaseModel):
    id: int
    student_number: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class SubjectBrief(BaseModel):
    id: int
    name: str
    code: str
    credits: int

    model_config = ConfigDict(from_attributes=True)


class ClassBrief(BaseModel):
    id: int
    name: str
    grade_level: int
    room: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SemesterBrief(BaseModel):
    id: int
    name: str
    academic_year: str
    start_date: date
    end_date: date

    model_config = ConfigDict(from_attributes=True)


class TeacherBrief(BaseModel):
    id: int
    name: str
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ClassSubjectDetail(BaseModel):
    id: int
    class_: ClassBrief = Field(serialization_alias="class")
    subject: SubjectBrief
    semester: SemesterBrief
    teacher: TeacherBrief

    model_config = ConfigDict(from_attributes=True)
