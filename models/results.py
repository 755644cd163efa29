from sqlalchemy import Column, Float, String, DateTime
from database.db import Base

class Result(Base):
    __tablename__ = "results"  # 원점수 기록 테이블 (append-only)

    id = Column(String(64), primary_key=True, index=True)         # 기록 고유 ID
    student_id = Column(String(64), index=True, nullable=False)   # 학생 ID
    subject_id = Column(String(64), index=True, nullable=False)   # 과목 ID
    class_id = Column(String(64), index=True)                     # 학급 ID
    term = Column(String(30), index=True, nullable=False)         # 학기
    session = Column(String(20), index=True, nullable=False)      # 학년도

    # ✅ 신규 형식: 평가 유형 + 점수
    assessment_type = Column(String(20))                          # classwork, homework, ca1, ca2, exam
    score = Column(Float)                                         # 점수
    max_score = Column(Float)                                     # 만점

    # ✅ 구 형식: 평가 유형별 필드에 직접 저장
    ca1 = Column(Float)
    ca2 = Column(Float)
    exam = Column(Float)

    recorded_at = Column(DateTime)                                # 기록 일시
    teacher_id = Column(String(64))                               # 기록한 교사 ID
