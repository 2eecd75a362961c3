"""
services/grading_service.py

- 점수(Score) CRUD + 성적 산출 조회를 담당하는 서비스 계층
- 쓰기 작업은 항상 감사 로그(audit_logs)와 같은 트랜잭션으로 commit
- 성적 계산은 services/grade_aggregator 의 순수 함수에 위임
  1) 학생 성적표: 학생의 점수를 과목별로 묶어 과목마다 요약
  2) 학급 성적부: 개설 과목의 점수를 학생별로 묶어 수강생마다 요약
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.class_subjects import ClassSubject as ClassSubjectModel
from models.enrollments import Enrollment as EnrollmentModel, ENROLLMENT_ACTIVE
from models.scores import Score as ScoreModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from schemas.common import PaginationMeta, make_pagination
from schemas.grades import (
    ClassBrief, ClassSubjectDetail, SemesterBrief, StudentBrief, SubjectBrief,
)
from schemas.scores import ScoreBulkCreate, ScoreCreate, ScoreType, ScoreUpdate
from services.audit_service import (
    AUDIT_CREATE, AUDIT_DELETE, AUDIT_UPDATE, write_audit_log,
)
from services.exceptions import NotFoundError, ValidationError
from services.grade_aggregator import ScoreRecord, aggregate, group_records

logger = logging.getLogger(__name__)

ENTITY_SCORE = "Score"


def to_score_record(score: ScoreModel, include_notes: bool = False) -> ScoreRecord:
    """ORM Score → 계산용 ScoreRecord (값이 잘못 저장돼 있으면 ValidationError)"""
    metadata: Dict[str, Any] = {
        "date_recorded": score.date_recorded.isoformat() if score.date_recorded else None,
    }
    if include_notes:
        metadata["notes"] = score.notes
    return ScoreRecord(
        raw_score=score.score,
        max_score=score.max_score,
        weight=score.weight,
        category=score.score_type,
        id=score.id,
        metadata=metadata,
    )


class GradingService:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # [공통] 존재 확인
    # ==========================================================
    def _get_or_404(self, model, entity_id: int, label: str):
        obj = self.db.query(model).filter(model.id == entity_id).first()
        if obj is None:
            raise NotFoundError(f"{label} not found", {"id": entity_id})
        return obj

    def existing_student_ids(self, student_ids: Iterable[int]) -> Set[int]:
        ids = set(student_ids)
        if not ids:
            return set()
        rows = self.db.query(StudentModel.id).filter(StudentModel.id.in_(ids)).all()
        return {row[0] for row in rows}

    # ==========================================================
    # [1단계] 점수 조회
    # ==========================================================
    def list_scores(
        self,
        student_id: Optional[int] = None,
        class_subject_id: Optional[int] = None,
        subject_id: Optional[int] = None,
        score_type: Optional[ScoreType] = None,
        page: int = 1,
        limit: int = 50,
    ) -> Tuple[List[ScoreModel], PaginationMeta]:
        query = self.db.query(ScoreModel)
        if student_id is not None:
            query = query.filter(ScoreModel.student_id == student_id)
        if class_subject_id is not None:
            query = query.filter(ScoreModel.class_subject_id == class_subject_id)
        if subject_id is not None:
            query = query.filter(ScoreModel.subject_id == subject_id)
        if score_type is not None:
            query = query.filter(ScoreModel.score_type == ScoreType(score_type).value)

        total = query.count()
        scores = (
            query.order_by(ScoreModel.date_recorded.desc(), ScoreModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return scores, make_pagination(total, page, limit)

    def get_score(self, score_id: int) -> ScoreModel:
        return self._get_or_404(ScoreModel, score_id, "Score")

    # ==========================================================
    # [2단계] 점수 등록 / 수정 / 삭제
    # ==========================================================
    def check_class_subject(self, class_subject_id: int, subject_id: int) -> ClassSubjectModel:
        class_subject = self._get_or_404(ClassSubjectModel, class_subject_id, "Class subject")
        self._get_or_404(SubjectModel, subject_id, "Subject")
        if class_subject.subject_id != subject_id:
            raise ValidationError(
                "Subject does not match class subject",
                {"class_subject_id": class_subject_id, "subject_id": subject_id},
            )
        return class_subject

    def create_score(self, data: ScoreCreate, actor_id: str) -> ScoreModel:
        self._get_or_404(StudentModel, data.student_id, "Student")
        self.check_class_subject(data.class_subject_id, data.subject_id)

        payload = data.model_dump(exclude={"date_recorded"})
        payload["score_type"] = data.score_type.value
        score = ScoreModel(**payload, date_recorded=data.date_recorded or datetime.now(timezone.utc))
        self.db.add(score)
        self.db.flush()

        write_audit_log(
            self.db, actor_id, AUDIT_CREATE, ENTITY_SCORE, score.id,
            {
                "student_id": data.student_id,
                "subject_id": data.subject_id,
                "score_type": data.score_type.value,
                "score": data.score,
            },
        )
        self.db.commit()
        self.db.refresh(score)
        logger.info(f"점수 등록 완료: score_id={score.id}, student_id={score.student_id}")
        return score

    def bulk_create_scores(self, data: ScoreBulkCreate, actor_id: str) -> List[ScoreModel]:
        self.check_class_subject(data.class_subject_id, data.subject_id)

        # 같은 평가에 한 학생 점수는 한 건만
        counts = Counter(item.student_id for item in data.scores)
        duplicates = sorted(sid for sid, n in counts.items() if n > 1)
        if duplicates:
            raise ValidationError("Duplicate students in bulk scores", {"student_ids": duplicates})

        student_ids = set(counts)
        missing = sorted(student_ids - self.existing_student_ids(student_ids))
        if missing:
            raise NotFoundError("One or more students not found", {"student_ids": missing})

        recorded_at = data.date_recorded or datetime.now(timezone.utc)
        scores = [
            ScoreModel(
                student_id=item.student_id,
                class_subject_id=data.class_subject_id,
                subject_id=data.subject_id,
                score_type=data.score_type.value,
                score=item.score,
                max_score=data.max_score,
                weight=data.weight,
                notes=item.notes,
                date_recorded=recorded_at,
            )
            for item in data.scores
        ]

        # ✅ 전부 성공하거나 전부 취소
        try:
            self.db.add_all(scores)
            self.db.flush()
            write_audit_log(
                self.db, actor_id, AUDIT_CREATE, ENTITY_SCORE, None,
                {
                    "bulk_create": True,
                    "class_subject_id": data.class_subject_id,
                    "score_type": data.score_type.value,
                    "count": len(scores),
                },
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"점수 일괄 등록 실패: class_subject_id={data.class_subject_id}")
            raise

        for score in scores:
            self.db.refresh(score)
        logger.info(f"점수 일괄 등록 완료: class_subject_id={data.class_subject_id}, count={len(scores)}")
        return scores

    def update_score(self, score_id: int, data: ScoreUpdate, actor_id: str) -> ScoreModel:
        score = self.get_score(score_id)
        updates = data.model_dump(exclude_unset=True)

        # ✅ 부분 수정 결과도 점수 규칙(만점 > 0, 점수 >= 0, 0 <= 가중치 <= 1)을 만족해야 함
        ScoreRecord(
            raw_score=updates.get("score", score.score),
            max_score=updates.get("max_score", score.max_score),
            weight=updates.get("weight", score.weight),
            category=score.score_type,
            id=score.id,
        )

        for key, value in updates.items():
            setattr(score, key, value)

        write_audit_log(self.db, actor_id, AUDIT_UPDATE, ENTITY_SCORE, score_id, {"updates": updates})
        self.db.commit()
        self.db.refresh(score)
        return score

    def delete_score(self, score_id: int, actor_id: str) -> None:
        score = self.get_score(score_id)
        self.db.delete(score)
        write_audit_log(self.db, actor_id, AUDIT_DELETE, ENTITY_SCORE, score_id)
        self.db.commit()

    # ==========================================================
    # [3단계] 성적 산출 조회
    # ==========================================================
    def get_student_grades(self, student_id: int, semester_id: Optional[int] = None) -> List[Dict[str, Any]]:
        """학생 성적표: 과목별 점수 내역 + 최종 성적 / 등급"""
        self._get_or_404(StudentModel, student_id, "Student")

        query = self.db.query(ScoreModel).filter(ScoreModel.student_id == student_id)
        if semester_id is not None:
            query = query.join(ClassSubjectModel, ClassSubjectModel.id == ScoreModel.class_subject_id).filter(
                ClassSubjectModel.semester_id == semester_id
            )
        scores = query.order_by(ScoreModel.date_recorded, ScoreModel.id).all()
        by_id = {s.id: s for s in scores}

        records = [to_score_record(s, include_notes=True) for s in scores]
        groups = group_records(records, key=lambda r: by_id[r.id].subject_id)

        results = []
        for group in groups.values():
            first = by_id[group[0].id]
            summary = aggregate(group)
            results.append({
                "subject": SubjectBrief.model_validate(first.subject).model_dump(),
                "class": ClassBrief.model_validate(first.class_subject.class_).model_dump(),
                "semester": SemesterBrief.model_validate(first.class_subject.semester).model_dump(mode="json"),
                **summary.to_dict(),
            })
        return results

    def get_class_subject_scores(self, class_subject_id: int) -> Dict[str, Any]:
        """학급 성적부: 수강 중(ACTIVE)인 학생 전원의 점수 내역 + 최종 성적 / 등급"""
        class_subject = self._get_or_404(ClassSubjectModel, class_subject_id, "Class subject")

        enrollments = (
            self.db.query(EnrollmentModel)
            .join(StudentModel, StudentModel.id == EnrollmentModel.student_id)
            .filter(
                EnrollmentModel.class_id == class_subject.class_id,
                EnrollmentModel.status == ENROLLMENT_ACTIVE,
            )
            .order_by(StudentModel.last_name, StudentModel.first_name, StudentModel.id)
            .all()
        )
        students = {e.student_id: e.student for e in enrollments}

        scores = (
            self.db.query(ScoreModel)
            .filter(ScoreModel.class_subject_id == class_subject_id)
            .order_by(ScoreModel.score_type, ScoreModel.date_recorded, ScoreModel.id)
            .all()
        )
        by_id = {s.id: s for s in scores}

        # 수강생이 아닌 학생의 점수는 성적부에서 제외
        records = [to_score_record(s) for s in scores if s.student_id in students]
        groups = group_records(records, key=lambda r: by_id[r.id].student_id, seed_keys=students.keys())

        rows = []
        for sid, group in groups.items():
            summary = aggregate(group)
            rows.append({
                "student": StudentBrief.model_validate(students[sid]).model_dump(),
                **summary.to_dict(),
            })

        return {
            "class_subject": ClassSubjectDetail.model_validate(class_subject).model_dump(mode="json", by_alias=True),
            "students": rows,
        }
