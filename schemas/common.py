"""
schemas/common.py

- 프로젝트 전반에서 재사용할 공용 스키마 모음
- Pydantic v2 기준
- 포함 내용:
  1) 에러 응답 표준: ErrorDetail, ErrorResponse
  2) 페이지네이션 메타: PaginationMeta, make_pagination()
"""

from __future__ import annotations

from datetime import datetime, timezone
from math import ceil
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# =========================================================
# 1) 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    """에러 코드/메시지를 담는 최소 단위"""
    code: str = Field(..., description="에러 식별 코드 (예: NOT_FOUND, VALIDATION_ERROR)")
    message: str = Field(..., description="사람이 읽을 수 있는 에러 메시지")
    details: Optional[Any] = Field(default=None, description="필드별 검증 오류 등 추가 정보")

    model_config = ConfigDict(extra="ignore")


class ErrorResponse(BaseModel):
    """
    전역 에러 핸들러에서 내려주는 표준 에러 응답
    - middlewares/error_handler.py 에서 이 스키마로 직렬화
    """
    success: bool = False
    error: ErrorDetail
    generated_at: str = Field(default_factory=now_iso, description="응답 생성 시각 (UTC, ISO8601)")

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) 페이지네이션 메타
# =========================================================

class PaginationMeta(BaseModel):
    """
    목록 응답에 포함시키는 메타 정보
    - total: 전체 개수
    - total_pages: 총 페이지 수 (결과가 없으면 0)
    """
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)


def make_pagination(total: int, page: int, limit: int) -> PaginationMeta:
    """페이징 메타를 계산해서 생성"""
    return PaginationMeta(page=page, limit=limit, total=total, total_pages=ceil(total / max(1, limit)))
