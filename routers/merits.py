from typing import Optional

from fastapi import APIRouter, Depends

from dependencies.store import get_store, term_and_session
from schemas.merits import Merit, MeritCreate, MeritSummary
from services.document_store import DocumentStore
from services.recording import award_merit, get_merit_summary
from services.records import get_student_merits

router = APIRouter(prefix="/merits", tags=["Merits"])


# ✅ [CREATE] 상점/벌점 부여 + 학기 요약 갱신
@router.post("/")
def create_merit(body: MeritCreate, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    merit = award_merit(store, body, term, session)
    return {"success": True, "data": Merit.model_validate(merit), "message": f"{merit.points:+d} points recorded"}


# ✅ [READ] 학생별 상벌점 목록
@router.get("/student/{student_id}")
def read_student_merits(
    student_id: str,
    term: Optional[str] = None,
    session: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    term, session = term_and_session(term, session)
    merits = get_student_merits(store, student_id, term, session)
    return {
        "success": True,
        "data": [Merit.model_validate(m) for m in merits],
        "message": f"{len(merits)} merit records",
    }


# ✅ [READ] 학기 누적 요약 (기록이 없으면 data=None)
@router.get("/student/{student_id}/summary")
def read_merit_summary(
    student_id: str,
    term: Optional[str] = None,
    session: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    term, session = term_and_session(term, session)
    summary = get_merit_summary(store, student_id, term, session)
    return {
        "success": True,
        "data": MeritSummary.model_validate(summary) if summary else None,
        "message": "Merit summary loaded" if summary else "No merit summary yet",
    }
