"""
services/grade_aggregator.py

- 점수 기록(ScoreRecord) 묶음 → 과목/학생 단위 성적 요약(SubjectGradeSummary) 계산
- 순수 함수만 사용 (DB / 전역 상태 / I/O 없음) → 같은 입력이면 항상 같은 결과
- 계산 규칙
  1) percentage = raw_score / max_score * 100  (소수 둘째 자리, 사사오입)
  2) weighted_contribution = percentage * weight  (반올림 없이 누적)
  3) final_grade = Σ(weighted) / Σ(weight)  (Σweight == 0 이면 0)
  4) letter_grade: 90↑ A / 80↑ B / 70↑ C / 60↑ D / 그 외 F
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence

from services.exceptions import ValidationError


# =========================================================
# 등급 구간 (하한 포함)
# =========================================================
LETTER_BANDS = (
    (90.0, "A"),
    (80.0, "B"),
    (70.0, "C"),
    (60.0, "D"),
)
FAILING_LETTER = "F"

# 점수 / 만점 허용 범위 (기존 DECIMAL(5,2) 점수 컬럼 범위)
MAX_POINTS = 999.99
MIN_MAX_SCORE = 0.01


def round2(value: float) -> float:
    """소수 둘째 자리 반올림 (half-up). 점수는 음수가 없으므로 floor(x*100 + 0.5) 로 충분"""
    return math.floor(value * 100 + 0.5) / 100


@dataclass(frozen=True)
class ScoreRecord:
    """성적 계산 입력 한 건. 생성 시점에 값 범위를 검증한다."""

    raw_score: float
    max_score: float
    weight: float
    category: str
    id: Optional[Any] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        for name in ("raw_score", "max_score", "weight"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValidationError(f"{name} must be a finite number", {name: str(value)})
        if self.max_score is None or self.max_score <= 0:
            raise ValidationError("Max score must be positive", {"max_score": self.max_score})
        if self.raw_score is None or self.raw_score < 0:
            raise ValidationError("Score cannot be negative", {"raw_score": self.raw_score})
        if self.weight is None or not 0 <= self.weight <= 1:
            raise ValidationError("Weight must be between 0 and 1", {"weight": self.weight})
        # 범위 밖 값은 백분율 계산이 overflow 될 수 있음
        if not MIN_MAX_SCORE <= self.max_score <= MAX_POINTS:
            raise ValidationError(f"Max score must be between {MIN_MAX_SCORE} and {MAX_POINTS}",
                                  {"max_score": self.max_score})
        if self.raw_score > MAX_POINTS:
            raise ValidationError(f"Score cannot exceed {MAX_POINTS}", {"raw_score": self.raw_score})


@dataclass(frozen=True)
class RecordResult:
    record: ScoreRecord
    percentage: float
    weighted_contribution: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record.id,
            "score_type": self.record.category,
            "score": self.record.raw_score,
            "max_score": self.record.max_score,
            "weight": self.record.weight,
            "percentage": self.percentage,
            "weighted_score": round2(self.weighted_contribution),
            **self.record.metadata,
        }


@dataclass(frozen=True)
class SubjectGradeSummary:
    records: List[RecordResult]
    total_weighted_score: float
    total_weight: float
    final_grade: float
    letter_grade: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scores": [r.to_dict() for r in self.records],
            "total_weighted_score": round2(self.total_weighted_score),
            "total_weight": self.total_weight,
            "final_grade": self.final_grade,
            "letter_grade": self.letter_grade,
        }


def compute_percentage(record: ScoreRecord) -> float:
    if record.max_score <= 0:
        raise ValidationError("Max score must be positive", {"max_score": record.max_score})
    return round2(record.raw_score / record.max_score * 100)


def compute_weighted_contribution(percentage: float, weight: float) -> float:
    return percentage * weight


def letter_grade(final_grade: float) -> str:
    for lower_bound, letter in LETTER_BANDS:
        if final_grade >= lower_bound:
            return letter
    return FAILING_LETTER


def aggregate(records: Sequence[ScoreRecord]) -> SubjectGradeSummary:
    """이미 분할된 한 그룹(학생-과목 / 학급과목-학생)의 성적 요약"""
    results: List[RecordResult] = []
    total_weighted_score = 0.0
    total_weight = 0.0

    for record in records:
        # 누적은 반올림 전 백분율로 (표시용 percentage만 반올림)
        raw_percentage = record.raw_score / record.max_score * 100
        contribution = compute_weighted_contribution(raw_percentage, record.weight)
        results.append(RecordResult(record, compute_percentage(record), contribution))
        total_weighted_score += contribution
        total_weight += record.weight

    final_grade = round2(total_weighted_score / total_weight) if total_weight > 0 else 0.0

    return SubjectGradeSummary(
        records=results,
        total_weighted_score=total_weighted_score,
        total_weight=total_weight,
        final_grade=final_grade,
        letter_grade=letter_grade(final_grade),
    )


def group_records(
    records: Iterable[ScoreRecord],
    key: Callable[[ScoreRecord], Hashable],
    seed_keys: Iterable[Hashable] = (),
) -> Dict[Hashable, List[ScoreRecord]]:
    """
    key 함수 기준으로 레코드를 분할 (입력 순서 유지)
    - seed_keys: 점수가 하나도 없어도 결과에 포함해야 하는 키 (예: 수강 중인 학생 전원)
    """
    groups: Dict[Hashable, List[ScoreRecord]] = {k: [] for k in seed_keys}
    for record in records:
        groups.setdefault(key(record), []).append(record)
    return groups
