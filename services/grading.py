"""
services/grading.py

- 성적 등급/평어 계산, 상점 등급 계산 (모든 성적표가 공유하는 단일 구현)
- 원점수 기록 정규화: 두 가지 저장 형식을 한 번에 변환
  1) 신규 형식: assessment_type + score
  2) 구 형식: ca1 / ca2 / exam 필드에 직접 저장
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from services.errors import ValidationError

ASSESSMENT_TYPES = ("classwork", "homework", "ca1", "ca2", "exam")
CA_TYPES = ("ca1", "ca2")
TERM_TYPES = ("ca1", "ca2", "exam")
LEGACY_SCORE_FIELDS = ("ca1", "ca2", "exam")

# (최소 백분율, 등급) - 위에서부터 순서대로 비교
GRADE_THRESHOLDS = (
    (70, "A"),
    (60, "B"),
    (50, "C"),
    (45, "D"),
    (40, "E"),
)

GRADE_REMARKS = {
    "A": "Excellent",
    "B": "Very Good",
    "C": "Good",
    "D": "Pass",
    "E": "Weak Pass",
    "F": "Fail",
}

# (최소 누적 점수, 등급)
MERIT_LEVELS = (
    (501, "diamond"),
    (301, "platinum"),
    (151, "gold"),
    (51, "silver"),
)


# ==========================================================
# [등급] 점수 → 등급 / 평어
# ==========================================================
def calculate_grade(score: float, max_score: float) -> str:
    if max_score <= 0:
        raise ValidationError(f"max_score must be positive, got {max_score}")

    percentage = score / max_score * 100
    for minimum, letter in GRADE_THRESHOLDS:
        if percentage >= minimum:
            return letter
    return "F"


def grade_remark(grade: str) -> str:
    return GRADE_REMARKS.get(grade, "N/A")


def merit_level(points: int) -> str:
    for minimum, level in MERIT_LEVELS:
        if points >= minimum:
            return level
    return "bronze"


def humanize_subject_id(subject_id: str) -> str:
    """과목 조회 실패 시 표시용 이름 (예: further_maths → Further Maths)"""
    return re.sub(r"\b\w", lambda m: m.group().upper(), subject_id.replace("_", " "))


# ==========================================================
# [정규화] 원점수 기록 → NormalizedResult
# ==========================================================
@dataclass
class NormalizedResult:
    subject_id: str
    scores: Dict[str, float] = field(default_factory=dict)
    recorded_at: Optional[datetime] = None


def _field(record: Any, name: str):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def normalize_result(record: Any) -> NormalizedResult:
    """
    모델 인스턴스/dict 모두 허용.
    구 형식 필드를 먼저 읽고, 신규 형식(assessment_type)이 있으면 해당 유형을 덮어씀.
    """
    scores: Dict[str, float] = {}

    for name in LEGACY_SCORE_FIELDS:
        value = _field(record, name)
        if value is not None:
            scores[name] = value

    assessment_type = _field(record, "assessment_type")
    if assessment_type:
        scores[assessment_type] = _field(record, "score") or 0

    return NormalizedResult(
        subject_id=_field(record, "subject_id"),
        scores=scores,
        recorded_at=_field(record, "recorded_at"),
    )


def extract_score(result: NormalizedResult, assessment_type: str) -> float:
    return result.scores.get(assessment_type, 0)


def reduce_subject_scores(
    results: Iterable[NormalizedResult],
    assessment_types: Sequence[str],
) -> Dict[str, Dict[str, float]]:
    """
    과목별로 묶어 평가 유형마다 최고 점수만 남김.
    기록이 있는 과목은 모두 포함, 요청한 유형의 점수가 없으면 0.
    """
    reduced: Dict[str, Dict[str, float]] = {}
    for result in results:
        entry = reduced.setdefault(result.subject_id, {t: 0 for t in assessment_types})
        for t in assessment_types:
            entry[t] = max(entry[t], extract_score(result, t))
    return reduced


def average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0
