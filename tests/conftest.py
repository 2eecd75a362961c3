# tests/conftest.py

import os
from datetime import date, datetime

# 앱 import 전에 테스트용 설정 주입
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["API_INTERNAL_TOKEN"] = "test-token"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from main import app
from models.class_subjects import ClassSubject
from models.classes import Class
from models.enrollments import Enrollment, ENROLLMENT_INACTIVE
from models.scores import Score
from models.semesters import Semester
from models.students import Student
from models.subjects import Subject
from models.teachers import Teacher

API_TOKEN = "test-token"


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(role="TEACHER", user_id="u-teacher-1"):
    return {
        "Authorization": f"Bearer {API_TOKEN}",
        "X-User-Id": user_id,
        "X-User-Role": role,
    }


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def teacher_headers():
    return auth_headers("TEACHER")


@pytest.fixture
def seed(db_session):
    """학기 1, 학급 1, 과목 2(수학/영어), 개설과목 2, 학생 3(2명 ACTIVE, 1명 INACTIVE)"""
    semester = Semester(name="2025-1", academic_year="2025-2026",
                        start_date=date(2025, 3, 1), end_date=date(2025, 7, 31))
    teacher = Teacher(employee_number="T001", name="Kim Teacher", email="kim@school.test")
    klass = Class(name="3-2", grade_level=3, capacity=30, room="R302")
    math = Subject(name="Mathematics", code="MATH3", credits=3)
    english = Subject(name="English", code="ENG3", credits=2)
    db_session.add_all([semester, teacher, klass, math, english])
    db_session.flush()

    math_cs = ClassSubject(class_id=klass.id, subject_id=math.id, teacher_id=teacher.id, semester_id=semester.id)
    english_cs = ClassSubject(class_id=klass.id, subject_id=english.id, teacher_id=teacher.id, semester_id=semester.id)

    alice = Student(student_number="S001", first_name="Alice", last_name="Brown")
    bob = Student(student_number="S002", first_name="Bob", last_name="Adams")
    carol = Student(student_number="S003", first_name="Carol", last_name="Clark")
    db_session.add_all([math_cs, english_cs, alice, bob, carol])
    db_session.flush()

    db_session.add_all([
        Enrollment(student_id=alice.id, class_id=klass.id, academic_year="2025-2026"),
        Enrollment(student_id=bob.id, class_id=klass.id, academic_year="2025-2026"),
        Enrollment(student_id=carol.id, class_id=klass.id, academic_year="2025-2026",
                   status=ENROLLMENT_INACTIVE),
    ])
    db_session.commit()

    return {
        "semester": semester.id,
        "teacher": teacher.id,
        "class": klass.id,
        "math": math.id,
        "english": english.id,
        "math_cs": math_cs.id,
        "english_cs": english_cs.id,
        "alice": alice.id,
        "bob": bob.id,
        "carol": carol.id,
    }


@pytest.fixture
def add_score(db_session):
    def _add(student_id, class_subject_id, subject_id, score, max_score, weight,
             score_type="QUIZ", recorded=None, notes=None):
        row = Score(
            student_id=student_id,
            class_subject_id=class_subject_id,
            subject_id=subject_id,
            score_type=score_type,
            score=score,
            max_score=max_score,
            weight=weight,
            notes=notes,
            date_recorded=recorded or datetime(2025, 4, 1, 9, 0),
        )
        db_session.add(row)
        db_session.commit()
        return row.id

    return _add
