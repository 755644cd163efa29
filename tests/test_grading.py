from datetime import datetime

import pytest

from services.errors import ValidationError
from services.grading import (
    average,
    calculate_grade,
    extract_score,
    grade_remark,
    humanize_subject_id,
    merit_level,
    normalize_result,
    reduce_subject_scores,
)


@pytest.mark.parametrize(
    "score, max_score, expected",
    [
        (14, 20, "A"),      # 70%
        (13.9, 20, "B"),
        (60, 100, "B"),
        (50, 100, "C"),
        (45, 100, "D"),
        (40, 100, "E"),
        (39.9, 100, "F"),
        (0, 20, "F"),
    ],
)
def test_calculate_grade_boundaries(score, max_score, expected):
    assert calculate_grade(score, max_score) == expected


def test_calculate_grade_rejects_non_positive_max():
    with pytest.raises(ValidationError):
        calculate_grade(10, 0)


def test_grade_remark_table():
    assert grade_remark("A") == "Excellent"
    assert grade_remark("E") == "Weak Pass"
    assert grade_remark("F") == "Fail"
    assert grade_remark("Z") == "N/A"


def test_merit_level_tiers():
    assert merit_level(0) == "bronze"
    assert merit_level(50) == "bronze"
    assert merit_level(51) == "silver"
    assert merit_level(151) == "gold"
    assert merit_level(301) == "platinum"
    assert merit_level(501) == "diamond"


def test_humanize_subject_id():
    assert humanize_subject_id("further_maths") == "Further Maths"
    assert humanize_subject_id("english") == "English"


def test_normalize_tagged_and_flat_shapes():
    tagged = normalize_result({"subject_id": "mathematics", "assessment_type": "ca1", "score": 15})
    flat = normalize_result({"subject_id": "mathematics", "ca1": 12, "ca2": 14, "exam": None})

    assert tagged.scores == {"ca1": 15}
    assert flat.scores == {"ca1": 12, "ca2": 14}
    assert extract_score(flat, "exam") == 0


def test_normalize_mixed_record_tagged_wins_for_its_type():
    mixed = normalize_result({
        "subject_id": "english",
        "assessment_type": "ca1",
        "score": 18,
        "ca1": 10,
        "exam": 50,
        "recorded_at": datetime(2024, 10, 1),
    })
    assert mixed.scores == {"ca1": 18, "exam": 50}
    assert mixed.recorded_at == datetime(2024, 10, 1)


def test_reduce_keeps_max_per_subject_and_type():
    results = [
        normalize_result({"subject_id": "mathematics", "assessment_type": "ca1", "score": 12}),
        normalize_result({"subject_id": "mathematics", "assessment_type": "ca1", "score": 15}),
        normalize_result({"subject_id": "mathematics", "ca2": 9}),
        normalize_result({"subject_id": "english", "assessment_type": "homework", "score": 8}),
    ]

    reduced = reduce_subject_scores(results, ("ca1", "ca2", "exam"))

    # homework 만 있는 과목도 0점으로 포함
    assert reduced == {
        "mathematics": {"ca1": 15, "ca2": 9, "exam": 0},
        "english": {"ca1": 0, "ca2": 0, "exam": 0},
    }
    # 같은 입력으로 다시 계산해도 결과 동일
    assert reduce_subject_scores(results, ("ca1", "ca2", "exam")) == reduced


def test_average_of_empty_is_zero():
    assert average([]) == 0
    assert average([4, 6]) == 5
