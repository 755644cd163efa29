from sqlalchemy import Column, String, DateTime
from database.db import Base

class Attendance(Base):
    __tablename__ = "attendance"  # 출결 기록 테이블 (append-only)

    id = Column(String(64), primary_key=True, index=True)        # 출결 고유 ID
    student_id = Column(String(64), index=True, nullable=False)  # 학생 ID
    class_id = Column(String(64), index=True)                    # 학급 ID
    date = Column(DateTime, nullable=False)                      # 날짜
    status = Column(String(20), nullable=False)                  # 출결 상태 (present, absent, late, excused)
    term = Column(String(30), index=True, nullable=False)        # 학기 (예: First Term)
    session = Column(String(20), index=True, nullable=False)     # 학년도 (예: 2024/2025)
    marked_by = Column(String(64))                               # 기록한 교사 ID
    reason = Column(String(200))                                 # 사유 (결석/지각 등 상세 이유)
