from typing import Optional

from fastapi import APIRouter, Depends

from dependencies.store import get_store, term_and_session
from schemas.attendance import Attendance, AttendanceCreate
from services.document_store import DocumentStore
from services.recording import mark_attendance
from services.records import get_student_attendance

router = APIRouter(prefix="/attendance", tags=["Attendance"])


# ✅ [CREATE] 출결 기록
@router.post("/")
def create_attendance(body: AttendanceCreate, store: DocumentStore = Depends(get_store)):
    term, session = term_and_session(body.term, body.session)
    record = mark_attendance(store, body, term, session)
    return {"success": True, "data": Attendance.model_validate(record), "message": "Attendance marked"}


# ✅ [READ] 학생별 출결 (최신순, 학생을 찾지 못하면 빈 목록)
@router.get("/student/{student_id}")
def read_student_attendance(
    student_id: str,
    term: Optional[str] = None,
    session: Optional[str] = None,
    store: DocumentStore = Depends(get_store),
):
    term, session = term_and_session(term, session)
    records = get_student_attendance(store, student_id, term, session)
    return {
        "success": True,
        "data": [Attendance.model_validate(r) for r in records],
        "message": f"{len(records)} attendance records for {term} {session}",
    }
