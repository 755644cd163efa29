from fastapi import APIRouter, Depends

from dependencies.store import get_store
from schemas.subjects import Subject, SubjectCreate
from services.document_store import DocumentStore
from services.errors import NotFoundError, ValidationError

router = APIRouter(prefix="/subjects", tags=["Subjects"])


# ✅ [CREATE] 과목 추가
@router.post("/")
def create_subject(body: SubjectCreate, store: DocumentStore = Depends(get_store)):
    if store.get("subjects", body.id) is not None:
        raise ValidationError(f"Subject already exists: {body.id}")
    subject = store.create("subjects", body.model_dump())
    return {"success": True, "data": Subject.model_validate(subject), "message": "Subject created"}


# ✅ [READ] 전체 과목 조회
@router.get("/")
def read_subjects(store: DocumentStore = Depends(get_store)):
    subjects = store.query("subjects", order_by="name")
    return {
        "success": True,
        "data": [Subject.model_validate(s) for s in subjects],
        "message": f"{len(subjects)} subjects",
    }


# ✅ [READ] 단일 과목 조회
@router.get("/{subject_id}")
def read_subject(subject_id: str, store: DocumentStore = Depends(get_store)):
    subject = store.get("subjects", subject_id)
    if subject is None:
        raise NotFoundError(f"Subject not found: {subject_id}")
    return {"success": True, "data": Subject.model_validate(subject), "message": "Subject loaded"}
