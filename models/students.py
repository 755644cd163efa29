from sqlalchemy import Column, String, Boolean, DateTime, JSON, func
from database.db import Base

class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(String(64), primary_key=True, index=True)                       # 내부 학생 ID (문서 ID)
    admission_number = Column(String(32), unique=True, index=True, nullable=False)  # 입학 번호 (외부 노출용)
    first_name = Column(String(100), nullable=False)                            # 이름
    last_name = Column(String(100), nullable=False)                             # 성
    class_id = Column(String(64), index=True, nullable=False)                   # 소속 반 ID
    class_name = Column(String(100))                                            # 소속 반 이름 (비정규화)
    gender = Column(String(10))                                                 # 성별 (male / female)
    parent_id = Column(String(64), index=True)                                  # 보호자 ID
    subjects = Column(JSON, default=list)                                       # 수강 과목 ID 목록
    academic_track = Column(String(50))                                         # 계열 (SS 과정: science/arts/commercial)
    trade_subject = Column(String(64))                                          # 직업 과목 ID (SS 과정)
    is_active = Column(Boolean, default=True, nullable=False)                   # 재학 여부 (soft delete)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
