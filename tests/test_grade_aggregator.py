# tests/test_grade_aggregator.py

import dataclasses

import pytest

from services.exceptions import ValidationError
from services.grade_aggregator import (
    ScoreRecord,
    aggregate,
    compute_percentage,
    compute_weighted_contribution,
    group_records,
    letter_grade,
    round2,
)


def rec(raw, max_score, weight, category="QUIZ", id=None):
    return ScoreRecord(raw_score=raw, max_score=max_score, weight=weight, category=category, id=id)


# === percentage / contribution ===


def test_compute_percentage_rounds_to_two_decimals():
    assert compute_percentage(rec(45, 50, 1)) == 90.0
    assert compute_percentage(rec(1, 3, 1)) == 33.33
    assert compute_percentage(rec(2, 3, 1)) == 66.67


def test_compute_percentage_rounds_half_up():
    assert compute_percentage(rec(1, 32, 1)) == 3.13
    assert round2(0.125) == 0.13


def test_compute_percentage_allows_extra_credit():
    assert compute_percentage(rec(55, 50, 1)) == 110.0


def test_compute_weighted_contribution_is_not_rounded():
    assert compute_weighted_contribution(33.333, 0.3) == pytest.approx(9.9999)


# === letter bands ===


@pytest.mark.parametrize(
    "final_grade, expected",
    [
        (100.0, "A"),
        (90.0, "A"),
        (89.99, "B"),
        (80.0, "B"),
        (79.99, "C"),
        (70.0, "C"),
        (69.99, "D"),
        (60.0, "D"),
        (59.99, "F"),
        (0.0, "F"),
    ],
)
def test_letter_grade_boundaries(final_grade, expected):
    assert letter_grade(final_grade) == expected


# === aggregate ===


def test_aggregate_empty_group_is_zero_f():
    summary = aggregate([])
    assert summary.records == []
    assert summary.final_grade == 0
    assert summary.letter_grade == "F"
    assert summary.total_weight == 0


def test_aggregate_all_zero_weight_is_zero_f():
    summary = aggregate([rec(100, 100, 0), rec(95, 100, 0)])
    assert len(summary.records) == 2
    assert summary.total_weight == 0
    assert summary.final_grade == 0
    assert summary.letter_grade == "F"


def test_aggregate_single_perfect_full_weight_record():
    summary = aggregate([rec(50, 50, 1)])
    assert summary.final_grade == 100.0
    assert summary.letter_grade == "A"


def test_aggregate_single_record_45_of_50():
    summary = aggregate([rec(45, 50, 1, id="s1")])
    assert summary.records[0].percentage == 90.0
    assert summary.final_grade == 90.0
    assert summary.letter_grade == "A"


def test_aggregate_weighted_average():
    summary = aggregate([rec(80, 100, 0.3), rec(70, 100, 0.7)])
    assert [r.percentage for r in summary.records] == [80.0, 70.0]
    assert summary.total_weighted_score == pytest.approx(73.0)
    assert summary.total_weight == pytest.approx(1.0)
    assert summary.final_grade == 73.0
    assert summary.letter_grade == "C"


def test_aggregate_partial_weights_normalise_by_total_weight():
    # 가중치 합이 1이 아니어도 가중 평균
    summary = aggregate([rec(90, 100, 0.2), rec(60, 100, 0.2)])
    assert summary.total_weight == pytest.approx(0.4)
    assert summary.final_grade == 75.0
    assert summary.letter_grade == "C"


def test_aggregate_accumulates_unrounded_percentages():
    # 33.333...% / 66.666...% 를 반올림 전 값으로 누적
    summary = aggregate([rec(1, 3, 0.5), rec(2, 3, 0.5)])
    assert summary.final_grade == 50.0


def test_aggregate_is_deterministic():
    records = [rec(17, 20, 0.25, "HOMEWORK", 1), rec(41, 50, 0.35, "MIDTERM", 2), rec(88, 100, 0.4, "FINAL", 3)]
    assert aggregate(records) == aggregate(records)
    assert aggregate(records).to_dict() == aggregate(list(records)).to_dict()


def test_zero_weight_records_do_not_change_grade():
    base = [rec(80, 100, 0.3), rec(70, 100, 0.7)]
    with_zero = base + [rec(0, 100, 0), rec(100, 100, 0)]
    a, b = aggregate(base), aggregate(with_zero)
    assert a.final_grade == b.final_grade
    assert a.letter_grade == b.letter_grade


def test_aggregate_preserves_record_metadata_in_output():
    record = ScoreRecord(raw_score=8, max_score=10, weight=0.5, category="PROJECT", id=42,
                         metadata={"notes": "late"})
    row = aggregate([record]).to_dict()["scores"][0]
    assert row["id"] == 42
    assert row["score_type"] == "PROJECT"
    assert row["percentage"] == 80.0
    assert row["weighted_score"] == 40.0
    assert row["notes"] == "late"


# === validation boundary ===


@pytest.mark.parametrize("raw, weight", [(0, 0), (10, 0.5), (-5, 2)])
def test_zero_max_score_rejected(raw, weight):
    with pytest.raises(ValidationError):
        rec(raw, 0, weight)


def test_negative_max_score_rejected():
    with pytest.raises(ValidationError):
        rec(10, -10, 0.5)


def test_negative_raw_score_rejected():
    with pytest.raises(ValidationError) as exc_info:
        rec(-1, 10, 0.5)
    assert exc_info.value.code == "VALIDATION_ERROR"


@pytest.mark.parametrize("weight", [-0.1, 1.01])
def test_out_of_range_weight_rejected(weight):
    with pytest.raises(ValidationError):
        rec(5, 10, weight)


def test_compute_percentage_rejects_zero_max_score_even_when_constructor_bypassed():
    record = rec(5, 10, 0.5)
    object.__setattr__(record, "max_score", 0)
    with pytest.raises(ValidationError):
        compute_percentage(record)


def test_dataclass_replace_revalidates():
    with pytest.raises(ValidationError):
        dataclasses.replace(rec(5, 10, 0.5), max_score=0)


@pytest.mark.parametrize("field", ["raw", "max_score", "weight"])
@pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_values_rejected(field, value):
    values = {"raw": 5, "max_score": 10, "weight": 0.5}
    values[field] = value
    with pytest.raises(ValidationError):
        rec(values["raw"], values["max_score"], values["weight"])


@pytest.mark.parametrize("raw, max_score", [(1e300, 1e-10), (5, 0.001), (5, 1000), (1000, 10)])
def test_values_outside_score_column_range_rejected(raw, max_score):
    with pytest.raises(ValidationError):
        rec(raw, max_score, 0.5)


def test_extreme_in_range_record_aggregates_without_overflow():
    summary = aggregate([rec(999.99, 0.01, 1), rec(0, 999.99, 1)])
    assert summary.records[0].percentage == pytest.approx(9999900.0)
    assert summary.final_grade == pytest.approx(4999950.0)
    assert summary.letter_grade == "A"


# === grouping ===


def test_group_records_keeps_insertion_order_and_seeds():
    records = [rec(1, 10, 1, id="a"), rec(2, 10, 1, id="b"), rec(3, 10, 1, id="c")]
    owner = {"a": "s2", "b": "s1", "c": "s2"}
    groups = group_records(records, key=lambda r: owner[r.id], seed_keys=["s1", "s2", "s3"])
    assert list(groups) == ["s1", "s2", "s3"]
    assert [r.id for r in groups["s2"]] == ["a", "c"]
    assert groups["s3"] == []
    assert aggregate(groups["s3"]).letter_grade == "F"
