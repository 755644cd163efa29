from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ✅ 입력용 (POST)
class StudentCreate(BaseModel):
    id: Optional[str] = None                     # 생략 시 자동 생성
    admission_number: Optional[str] = None       # 생략 시 STU<연도><4자리> 자동 발급
    first_name: str = Field(..., min_length=1)   # 이름
    last_name: str = Field(..., min_length=1)    # 성
    class_id: str                                # 소속 반 ID
    gender: Optional[str] = None                 # 성별
    parent_id: Optional[str] = None              # 보호자 ID
    subjects: List[str] = Field(default_factory=list)  # 수강 과목 ID 목록
    academic_track: Optional[str] = None         # SS 과정 계열
    trade_subject: Optional[str] = None          # SS 과정 직업 과목


# ✅ 반 이동 요청
class StudentTransfer(BaseModel):
    new_class_id: str


# ✅ 수강 과목 변경 요청 (필드를 생략하면 기존 값 유지)
class StudentSubjectsUpdate(BaseModel):
    subjects: List[str]
    academic_track: Optional[str] = None
    trade_subject: Optional[str] = None


# ✅ 출력용 (GET 등)
class Student(BaseModel):
    id: str
    admission_number: str
    first_name: str
    last_name: str
    class_id: str
    class_name: Optional[str] = None
    gender: Optional[str] = None
    parent_id: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    academic_track: Optional[str] = None
    trade_subject: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
