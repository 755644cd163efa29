from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class MeritCreate(BaseModel):
    student_id: str                          # 내부 ID 또는 입학 번호
    points: int                              # 상점(+) / 벌점(-), 0 불가
    category: Optional[str] = None           # 분류 (academic, behavior ...)
    reason: Optional[str] = None
    teacher_id: Optional[str] = None
    date: Optional[datetime] = None          # 생략 시 현재 시각
    term: Optional[str] = None
    session: Optional[str] = None


class Merit(BaseModel):
    id: str
    student_id: str
    class_id: Optional[str] = None
    teacher_id: Optional[str] = None
    date: datetime
    points: int
    category: Optional[str] = None
    reason: Optional[str] = None
    term: str
    session: str

    class Config:
        from_attributes = True


class MeritSummary(BaseModel):
    id: str
    student_id: str
    term: str
    session: str
    total: int                               # 누적 점수 (0 이상)
    level: str                               # bronze / silver / gold / platinum / diamond
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True
