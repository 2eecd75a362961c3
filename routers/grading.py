from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from dependencies.security import (
    CurrentUser, require_roles,
    ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT, ROLE_PARENT,
)
from schemas.scores import Score as ScoreSchema
from schemas.scores import ScoreBulkCreate, ScoreCreate, ScoreType, ScoreUpdate
from services.grading_service import GradingService

router = APIRouter(prefix="/grading", tags=["grading"])

staff_only = require_roles(ROLE_ADMIN, ROLE_TEACHER)
report_card_readers = require_roles(ROLE_ADMIN, ROLE_TEACHER, ROLE_STUDENT, ROLE_PARENT)


def get_service(db: Session = Depends(get_db)) -> GradingService:
    return GradingService(db)


def _score_out(score) -> dict:
    return ScoreSchema.model_validate(score).model_dump(mode="json")


# ==========================================================
# [1단계] 점수 목록 / 일괄 등록 (정적 경로 먼저)
# ==========================================================

# ✅ [LIST] 점수 목록 (학생/개설과목/과목/평가유형 필터 + 페이징)
@router.get("/scores")
def list_scores(
    student_id: Optional[int] = None,
    class_subject_id: Optional[int] = None,
    subject_id: Optional[int] = None,
    score_type: Optional[ScoreType] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    service: GradingService = Depends(get_service),
    _user: CurrentUser = Depends(staff_only),
):
    scores, pagination = service.list_scores(
        student_id=student_id,
        class_subject_id=class_subject_id,
        subject_id=subject_id,
        score_type=score_type,
        page=page,
        limit=limit,
    )
    return {
        "success": True,
        "data": [_score_out(s) for s in scores],
        "pagination": pagination.model_dump(),
    }


# ✅ [CREATE] 점수 한 건 등록
@router.post("/scores", status_code=201)
def create_score(
    payload: ScoreCreate,
    service: GradingService = Depends(get_service),
    user: CurrentUser = Depends(staff_only),
):
    score = service.create_score(payload, user.user_id)
    return {"success": True, "data": _score_out(score), "message": "Score created successfully"}


# ✅ [BULK CREATE] 같은 평가의 학급 전체 점수 일괄 등록
@router.post("/scores/bulk", status_code=201)
def bulk_create_scores(
    payload: ScoreBulkCreate,
    service: GradingService = Depends(get_service),
    user: CurrentUser = Depends(staff_only),
):
    scores = service.bulk_create_scores(payload, user.user_id)
    return {
        "success": True,
        "data": {"scores": [_score_out(s) for s in scores], "count": len(scores)},
        "message": f"{len(scores)} scores created successfully",
    }


# ==========================================================
# [2단계] 성적 산출 조회
# ==========================================================

# ✅ [REPORT CARD] 학생 성적표 (과목별 최종 성적 / 등급)
@router.get("/students/{student_id}/grades")
def get_student_grades(
    student_id: int,
    semester_id: Optional[int] = None,
    service: GradingService = Depends(get_service),
    _user: CurrentUser = Depends(report_card_readers),
):
    grades = service.get_student_grades(student_id, semester_id)
    return {"success": True, "data": grades, "message": "Student grades retrieved successfully"}


# ✅ [GRADEBOOK] 개설 과목 성적부 (수강생별 최종 성적 / 등급)
@router.get("/class-subjects/{class_subject_id}/scores")
def get_class_subject_scores(
    class_subject_id: int,
    service: GradingService = Depends(get_service),
    _user: CurrentUser = Depends(staff_only),
):
    result = service.get_class_subject_scores(class_subject_id)
    return {"success": True, "data": result, "message": "Class subject scores retrieved successfully"}


# ==========================================================
# [3단계] 완전 동적 라우터
# ==========================================================

# ✅ [READ] 점수 상세 조회
@router.get("/scores/{score_id}")
def read_score(
    score_id: int,
    service: GradingService = Depends(get_service),
    _user: CurrentUser = Depends(staff_only),
):
    return {"success": True, "data": _score_out(service.get_score(score_id)), "message": "Score retrieved successfully"}


# ✅ [UPDATE] 점수 수정 (부분 수정)
@router.put("/scores/{score_id}")
def update_score(
    score_id: int,
    payload: ScoreUpdate,
    service: GradingService = Depends(get_service),
    user: CurrentUser = Depends(staff_only),
):
    score = service.update_score(score_id, payload, user.user_id)
    return {"success": True, "data": _score_out(score), "message": "Score updated successfully"}


# ✅ [DELETE] 점수 삭제
@router.delete("/scores/{score_id}")
def delete_score(
    score_id: int,
    service: GradingService = Depends(get_service),
    user: CurrentUser = Depends(staff_only),
):
    service.delete_score(score_id, user.user_id)
    return {"success": True, "data": {"score_id": score_id}, "message": "Score deleted successfully"}
