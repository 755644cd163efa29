from sqlalchemy import Column, String, Boolean, DateTime, JSON
from database.db import Base

class ReportCard(Base):
    __tablename__ = "report_cards"  # 생성된 성적표 스냅샷 (CA / 학기말 / 주간)

    id = Column(String(255), primary_key=True, index=True)       # 결정적 ID (같은 ID로 다시 쓰면 덮어씀)
    kind = Column(String(10), index=True, nullable=False)        # 종류: ca, term, weekly
    student_id = Column(String(64), index=True, nullable=False)  # 학생 ID
    term = Column(String(30), nullable=False)                    # 학기
    session = Column(String(20), nullable=False)                 # 학년도
    payload = Column(JSON, nullable=False)                       # 성적표 본문 (비정규화 문서)
    generated_at = Column(DateTime, nullable=False)              # 생성 일시
    generated_by = Column(String(64))                            # 생성한 관리자 ID
    sent_to_parent = Column(Boolean, default=False, nullable=False)  # 학부모 발송 여부
    sent_at = Column(DateTime)                                   # 발송 일시
