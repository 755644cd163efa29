from fastapi import APIRouter, Depends

from dependencies.store import get_store
from schemas.students import Student, StudentCreate, StudentSubjectsUpdate, StudentTransfer
from services import recording
from services.document_store import DocumentStore
from services.errors import NotFoundError
from services.records import get_student

router = APIRouter(prefix="/students", tags=["Students"])


# ==========================================================
# [1단계] 등록 / 조회
# ==========================================================

# ✅ [CREATE] 학생 등록 (입학 번호 생략 시 자동 발급)
@router.post("/")
def create_student(body: StudentCreate, store: DocumentStore = Depends(get_store)):
    student = recording.create_student(store, body)
    return {
        "success": True,
        "data": Student.model_validate(student),
        "message": f"Student {student.admission_number} created",
    }


# ✅ [READ] 반별 학생 목록
@router.get("/class/{class_id}")
def list_students_by_class(
    class_id: str,
    include_inactive: bool = False,
    store: DocumentStore = Depends(get_store),
):
    students = recording.list_class_students(store, class_id, include_inactive)
    return {
        "success": True,
        "data": [Student.model_validate(s) for s in students],
        "message": f"{len(students)} students in {class_id}",
    }


# ✅ [READ] 학생 상세 (내부 ID 또는 입학 번호)
@router.get("/{student_id}")
def read_student(student_id: str, store: DocumentStore = Depends(get_store)):
    student = get_student(store, student_id)
    if student is None:
        raise NotFoundError(f"Student not found: {student_id}")
    return {"success": True, "data": Student.model_validate(student), "message": "Student loaded"}


# ==========================================================
# [2단계] 변경
# ==========================================================

# ✅ [UPDATE] 반 이동
@router.put("/{student_id}/transfer")
def transfer_student(student_id: str, body: StudentTransfer, store: DocumentStore = Depends(get_store)):
    student = recording.transfer_student(store, student_id, body.new_class_id)
    return {
        "success": True,
        "data": Student.model_validate(student),
        "message": f"Student transferred to {student.class_name}",
    }


# ✅ [UPDATE] 수강 과목 / 계열 변경
@router.put("/{student_id}/subjects")
def update_subjects(student_id: str, body: StudentSubjectsUpdate, store: DocumentStore = Depends(get_store)):
    student = recording.update_student_subjects(store, student_id, body)
    return {"success": True, "data": Student.model_validate(student), "message": "Subjects updated"}


# ✅ [DELETE] 비활성화 (soft delete, 기록은 유지)
@router.delete("/{student_id}")
def deactivate_student(student_id: str, store: DocumentStore = Depends(get_store)):
    student = recording.deactivate_student(store, student_id)
    return {"success": True, "data": Student.model_validate(student), "message": "Student deactivated"}
