from sqlalchemy import Column, String, Boolean
from database.db import Base

class Subject(Base):
    __tablename__ = "subjects"  # 과목 정보 테이블

    id = Column(String(64), primary_key=True, index=True)      # 과목 ID (예: mathematics)
    name = Column(String(100), nullable=False)                # 과목 이름 (예: Mathematics)
    code = Column(String(20))                                 # 과목 코드 (예: MTH)
    category = Column(String(50))                             # 과목 분류 (Core, Science, Arts ...)
    is_core = Column(Boolean, default=False)                  # 필수 과목 여부
