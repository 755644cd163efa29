from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TeacherType = Literal["class_teacher", "subject_teacher", "both"]


# ✅ 교사 등록 요청 (승인 전까지 비활성 상태로 저장)
class TeacherCreate(BaseModel):
    id: str                                         # 교사 ID (로그인 계정 ID와 동일)
    staff_id: Optional[str] = None                  # 생략 시 STAFF_<ID>
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone_number: Optional[str] = None
    teacher_type: TeacherType = "subject_teacher"
    subjects: List[str] = Field(default_factory=list)


# ✅ 출력용
class Teacher(BaseModel):
    id: str
    staff_id: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    teacher_type: Optional[str] = None
    is_class_teacher: bool = False
    is_subject_teacher: bool = False
    assigned_class_id: Optional[str] = None
    subjects: List[str] = Field(default_factory=list)
    is_active: bool = False
    is_pending: bool = True
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# =========================================================
# 승인 요청
# =========================================================

class ApprovalCreate(BaseModel):
    teacher_id: str
    requested_class_id: Optional[str] = None
    requested_subjects: List[str] = Field(default_factory=list)


class ApprovalReview(BaseModel):
    admin_id: str


class ApprovalRejection(ApprovalReview):
    reason: str = Field(..., min_length=1)


class TeacherApproval(BaseModel):
    id: str
    teacher_id: str
    first_name: str
    last_name: str
    email: str
    teacher_type: Optional[str] = None
    requested_class_id: Optional[str] = None
    requested_subjects: List[str] = Field(default_factory=list)
    status: str
    submitted_at: datetime
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None

    class Config:
        from_attributes = True


# =========================================================
# 학급 배정
# =========================================================

class ClassTeacherAssign(BaseModel):
    teacher_id: str


class SubjectTeacherAssign(BaseModel):
    subject_id: str
    teacher_id: str


class SubjectTeacherAssignment(BaseModel):
    id: str
    class_id: str
    subject_id: str
    subject_name: Optional[str] = None
    teacher_id: str
    teacher_name: Optional[str] = None
    assigned_at: datetime

    class Config:
        from_attributes = True
