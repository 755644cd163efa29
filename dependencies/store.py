from typing import Optional, Tuple

from fastapi import Depends
from sqlalchemy.orm import Session

from database.db import get_db
from services.academic_calendar import current_session, current_term, parse_session, validate_term
from services.document_store import DocumentStore


# ✅ 요청마다 세션 하나 → 문서 저장소 어댑터 하나
def get_store(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def term_and_session(term: Optional[str], session: Optional[str]) -> Tuple[str, str]:
    """클라이언트가 학기/학년도를 생략하면 학교 달력 기준 현재 값으로 채움"""
    term = validate_term(term) if term else current_term()
    if session:
        parse_session(session)
    else:
        session = current_session()
    return term, session
