from typing import Optional

from fastapi import APIRouter, Depends

from dependencies.store import get_store, term_and_session
from schemas.results import Result, ResultCreate
from services.document_store import DocumentStore
from services.recording import record_result
from services.records import get_student_results_raw

router = APIRouter(prefix="/results", tags=["Results"])


# ✅ [CREATE] 원점수 기록 (classwork / homework / ca1 / ca2 / exam)
@router.post("/")
def create_result(body: ResultCreate, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    record = record_result(store, body, term, session)
    return {"success": True, "data": Result.model_validate(record), "message": "Result recorded"}


# ✅ [READ] 학생별 원점수 (기록 순)
@router.get("/student/{student_id}")
def read_student_results(
    student_id: str,
    term: Optional[str] = None,
    session: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    term, session = term_and_session(term, session)
    records = get_student_results_raw(store, student_id, term, session)
    return {
        "success": True,
        "data": [Result.model_validate(r) for r in records],
        "message": f"{len(records)} results",
    }
