from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

AttendanceStatus = Literal["present", "absent", "late", "excused"]


class AttendanceCreate(BaseModel):
    student_id: str                          # 내부 ID 또는 입학 번호
    date: datetime                           # 날짜
    status: AttendanceStatus                 # 출결 상태
    term: Optional[str] = None               # 생략 시 현재 학기
    session: Optional[str] = None            # 생략 시 현재 학년도
    marked_by: Optional[str] = None          # 기록한 교사 ID
    reason: Optional[str] = None             # 결석/지각 사유


class Attendance(BaseModel):
    id: str                                  # 출결 고유 ID
    student_id: str                          # 학생 ID
    class_id: Optional[str] = None
    date: datetime
    status: str
    term: str
    session: str
    marked_by: Optional[str] = None
    reason: Optional[str] = None

    class Config:
        from_attributes = True
