from sqlalchemy import Column, DateTime, Integer, String
from database.db import Base

class SchoolClass(Base):
    __tablename__ = "classes"  # 학급 정보 테이블

    id = Column(String(64), primary_key=True, index=True)       # 학급 ID (예: jss_1a)
    name = Column(String(100), nullable=False)                 # 학급 이름 (예: JSS 1A)
    grade = Column(Integer, nullable=False)                    # 학년 (1~12)
    section = Column(String(10))                               # 반 구분 (A, B, C ...)
    level = Column(String(50))                                 # 과정 (Primary / Junior Secondary / Senior Secondary)
    class_teacher_id = Column(String(64))                      # 담임 교사 ID
    class_teacher_name = Column(String(200))                   # 담임 교사 이름 (비정규화)
    class_teacher_assigned_at = Column(DateTime)               # 담임 배정 일시
