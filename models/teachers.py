from sqlalchemy import Column, String, Boolean, DateTime, JSON, func
from database.db import Base

class Teacher(Base):
    __tablename__ = "teachers"  # 교사 정보 테이블

    id = Column(String(64), primary_key=True, index=True)              # 교사 ID
    staff_id = Column(String(32), index=True)                          # 교직원 번호
    first_name = Column(String(100), nullable=False)                   # 이름
    last_name = Column(String(100), nullable=False)                    # 성
    email = Column(String(200), unique=True, nullable=False)           # 이메일
    phone_number = Column(String(30))                                  # 연락처
    teacher_type = Column(String(30), default="subject_teacher")       # class_teacher / subject_teacher / both
    is_class_teacher = Column(Boolean, default=False, nullable=False)  # 담임 배정 여부
    is_subject_teacher = Column(Boolean, default=False, nullable=False)  # 교과 배정 여부
    assigned_class_id = Column(String(64), index=True)                 # 담임 학급 ID
    subjects = Column(JSON, default=list)                              # 담당 과목 ID 목록
    is_active = Column(Boolean, default=False, nullable=False)         # 승인 전에는 비활성
    is_pending = Column(Boolean, default=True, nullable=False)         # 관리자 승인 대기
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class TeacherApproval(Base):
    __tablename__ = "teacher_approvals"  # 교사 가입 승인 요청 테이블

    id = Column(String(64), primary_key=True, index=True)
    teacher_id = Column(String(64), index=True, nullable=False)        # 대상 교사 ID
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(200), nullable=False)
    teacher_type = Column(String(30))
    requested_class_id = Column(String(64))                            # 희망 담임 학급
    requested_subjects = Column(JSON, default=list)                    # 희망 과목 ID 목록
    status = Column(String(20), index=True, nullable=False, default="pending")  # pending / approved / rejected
    submitted_at = Column(DateTime, nullable=False)
    reviewed_by = Column(String(64))                                   # 처리한 관리자 ID
    reviewed_at = Column(DateTime)
    review_notes = Column(String(300))                                 # 반려 사유


class SubjectTeacherAssignment(Base):
    __tablename__ = "class_subject_teachers"  # 학급별 교과 담당 교사 (학급·과목당 1명)

    id = Column(String(160), primary_key=True, index=True)             # <classId>_<subjectId>
    class_id = Column(String(64), index=True, nullable=False)
    subject_id = Column(String(64), nullable=False)
    subject_name = Column(String(100))
    teacher_id = Column(String(64), index=True, nullable=False)
    teacher_name = Column(String(200))
    assigned_at = Column(DateTime, nullable=False)
