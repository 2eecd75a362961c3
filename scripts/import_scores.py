import csv
import logging
import sys
from typing import List, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from database.db import SessionLocal
from models.scores import Score as ScoreModel  # ✅ 모델 import
from schemas.scores import ScoreCreate
from services.audit_service import AUDIT_CREATE, write_audit_log
from services.exceptions import NotFoundError, ServiceError
from services.grading_service import GradingService

logger = logging.getLogger(__name__)

CSV_PATH = "data/scores.csv"  # ✅ 기본 파일 경로
IMPORT_USER_ID = "csv-import"

# CSV 헤더: student_id,class_subject_id,subject_id,score_type,score,max_score,weight,notes,date_recorded


def parse_rows(rows) -> Tuple[List[Tuple[int, ScoreCreate]], List[Tuple[int, str]]]:
    """CSV 행 → (행 번호, ScoreCreate) (검증 실패 행은 (행 번호, 사유)로 따로 모음)"""
    valid, rejected = [], []
    for line_no, row in enumerate(rows, start=2):  # 1행은 헤더
        cleaned = {k: v for k, v in row.items() if v not in (None, "")}
        try:
            valid.append((line_no, ScoreCreate(**cleaned)))
        except PydanticValidationError as e:
            rejected.append((line_no, "; ".join(err["msg"] for err in e.errors())))
    return valid, rejected


def check_references(service: GradingService, parsed: List[Tuple[int, ScoreCreate]]):
    """학생 / 개설 과목 / 과목이 존재하고 서로 맞는 행만 통과"""
    known_students = service.existing_student_ids(data.student_id for _, data in parsed)
    accepted, rejected = [], []
    for line_no, data in parsed:
        try:
            if data.student_id not in known_students:
                raise NotFoundError("Student not found", {"id": data.student_id})
            service.check_class_subject(data.class_subject_id, data.subject_id)
        except ServiceError as e:
            rejected.append((line_no, e.message))
            continue
        accepted.append(data)
    return accepted, rejected


def import_scores(csv_path: str = CSV_PATH) -> Tuple[int, List[Tuple[int, str]]]:
    db: Session = SessionLocal()
    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            parsed, rejected = parse_rows(csv.DictReader(csvfile))

        valid, unmatched = check_references(GradingService(db), parsed)
        rejected = sorted(rejected + unmatched)

        for data in valid:
            payload = data.model_dump(exclude_none=True)
            payload["score_type"] = data.score_type.value
            db.add(ScoreModel(**payload))

        if valid:
            write_audit_log(db, IMPORT_USER_ID, AUDIT_CREATE, "Score", None,
                            {"bulk_create": True, "source": csv_path, "count": len(valid)})
            db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    for line_no, reason in rejected:
        logger.warning(f"{line_no}행 건너뜀: {reason}")
    return len(valid), rejected


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    count, skipped = import_scores(sys.argv[1] if len(sys.argv) > 1 else CSV_PATH)
    print(f"✅ 점수 CSV → DB 마이그레이션 완료: {count}건 등록, {len(skipped)}건 건너뜀")
