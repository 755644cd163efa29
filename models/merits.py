from sqlalchemy import Column, Integer, String, DateTime, func
from database.db import Base

class Merit(Base):
    __tablename__ = "merits"  # 상벌점 기록 테이블 (append-only)

    id = Column(String(64), primary_key=True, index=True)        # 상벌점 고유 ID
    student_id = Column(String(64), index=True, nullable=False)  # 학생 ID
    class_id = Column(String(64), index=True)                    # 학급 ID
    teacher_id = Column(String(64))                              # 부여한 교사 ID
    date = Column(DateTime, nullable=False)                      # 부여 일시
    points = Column(Integer, nullable=False)                     # 점수 (음수 = 벌점)
    category = Column(String(50))                                # 분류 (예: academic, behavior)
    reason = Column(String(300))                                 # 사유
    term = Column(String(30), index=True, nullable=False)        # 학기
    session = Column(String(20), index=True, nullable=False)     # 학년도


class MeritSummary(Base):
    __tablename__ = "merit_summaries"  # 학기별 누적 상점 요약 (항상 0 이상)

    id = Column(String(128), primary_key=True, index=True)       # <studentId>_<term>_<session>
    student_id = Column(String(64), index=True, nullable=False)
    term = Column(String(30), nullable=False)
    session = Column(String(20), nullable=False)
    total = Column(Integer, nullable=False, default=0)           # 누적 점수
    level = Column(String(20), nullable=False, default="bronze") # 등급 (bronze ~ diamond)
    last_updated = Column(DateTime, server_default=func.now(), onupdate=func.now())
