from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

AssessmentType = Literal["classwork", "homework", "ca1", "ca2", "exam"]


# ✅ 원점수 기록 요청 (항상 신규 형식으로 저장)
class ResultCreate(BaseModel):
    student_id: str                          # 내부 ID 또는 입학 번호
    subject_id: str
    assessment_type: AssessmentType
    score: float
    max_score: Optional[float] = None        # 생략 시 유형별 기본 만점
    term: Optional[str] = None
    session: Optional[str] = None
    teacher_id: Optional[str] = None
    recorded_at: Optional[datetime] = None   # 생략 시 현재 시각


# ✅ 조회용: 신규 형식 / 구 형식 필드를 모두 노출
class Result(BaseModel):
    id: str
    student_id: str
    subject_id: str
    class_id: Optional[str] = None
    term: str
    session: str
    assessment_type: Optional[str] = None
    score: Optional[float] = None
    max_score: Optional[float] = None
    ca1: Optional[float] = None
    ca2: Optional[float] = None
    exam: Optional[float] = None
    recorded_at: Optional[datetime] = None
    teacher_id: Optional[str] = None

    class Config:
        from_attributes = True
