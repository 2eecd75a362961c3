from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from services.grade_aggregator import MAX_POINTS, MIN_MAX_SCORE


# ✅ 평가 유형
class ScoreType(str, Enum):
    HOMEWORK = "HOMEWORK"
    QUIZ = "QUIZ"
    MIDTERM = "MIDTERM"
    FINAL = "FINAL"
    PROJECT = "PROJECT"
    PARTICIPATION = "PARTICIPATION"


# ✅ 입력용 (POST) - 점수 한 건 등록
class ScoreCreate(BaseModel):
    student_id: int                                              # 학생 ID
    class_subject_id: int                                        # 개설 과목 ID
    subject_id: int                                              # 과목 ID
    score_type: ScoreType                                        # 평가 유형
    score: float = Field(..., ge=0, le=MAX_POINTS, allow_inf_nan=False, description="취득 점수 (0 ~ 999.99)")
    max_score: float = Field(..., ge=MIN_MAX_SCORE, le=MAX_POINTS, allow_inf_nan=False, description="만점 (0.01 ~ 999.99)")
    weight: float = Field(..., ge=0, le=1, allow_inf_nan=False, description="반영 비율 (0~1)")
    notes: Optional[str] = None                                  # 비고
    date_recorded: Optional[datetime] = None                     # 기록 일시 (없으면 현재 시각)


# ✅ 입력용 (PUT) - 부분 수정
class ScoreUpdate(BaseModel):
    score: Optional[float] = Field(default=None, ge=0, le=MAX_POINTS, allow_inf_nan=False)
    max_score: Optional[float] = Field(default=None, ge=MIN_MAX_SCORE, le=MAX_POINTS, allow_inf_nan=False)
    weight: Optional[float] = Field(default=None, ge=0, le=1, allow_inf_nan=False)
    notes: Optional[str] = None


# ✅ 일괄 등록 - 학생별 점수 항목
class BulkScoreItem(BaseModel):
    student_id: int
    score: float = Field(..., ge=0, le=MAX_POINTS, allow_inf_nan=False)
    notes: Optional[str] = None


# ✅ 일괄 등록 (POST /scores/bulk) - 같은 평가의 학급 전체 점수
class ScoreBulkCreate(BaseModel):
    class_subject_id: int
    subject_id: int
    score_type: ScoreType
    max_score: float = Field(..., ge=MIN_MAX_SCORE, le=MAX_POINTS, allow_inf_nan=False)
    weight: float = Field(..., ge=0, le=1, allow_inf_nan=False)
    scores: List[BulkScoreItem] = Field(..., min_length=1)
    date_recorded: Optional[datetime] = None


# ✅ 출력용 (GET, 상세조회 등)
class Score(BaseModel):
    id: int
    student_id: int
    class_subject_id: int
    subject_id: int
    score_type: ScoreType
    score: float
    max_score: float
    weight: float
    notes: Optional[str] = None
    date_recorded: datetime

    model_config = ConfigDict(from_attributes=True)
