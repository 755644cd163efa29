from datetime import datetime
from typing import Optional

from pydantic import BaseModel


# ✅ 생성(Create) 요청용 스키마
# id는 "jss_1a" 처럼 사람이 읽을 수 있는 값을 직접 지정
class ClassCreate(BaseModel):
    id: str                                  # 학급 ID
    name: str                                # 학급 이름 (예: JSS 1A)
    grade: int                               # 학년
    section: Optional[str] = None            # 반 구분 (A, B ...)
    level: Optional[str] = None              # 과정 (Junior Secondary 등)
    class_teacher_id: Optional[str] = None   # 담임 교사 ID (배정은 /classes/{id}/class-teacher 사용)


# ✅ 응답(Response) / 조회(Read) 용 스키마
class SchoolClass(ClassCreate):
    class_teacher_name: Optional[str] = None
    class_teacher_assigned_at: Optional[datetime] = None

    class Config:
        from_attributes = True
