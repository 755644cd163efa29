from fastapi import APIRouter, Depends

from dependencies.store import get_store
from schemas.classes import ClassCreate, SchoolClass
from schemas.teachers import ClassTeacherAssign, SubjectTeacherAssign, SubjectTeacherAssignment, Teacher
from services import staffing
from services.document_store import DocumentStore
from services.errors import NotFoundError, ValidationError

router = APIRouter(prefix="/classes", tags=["Classes"])


# ✅ [CREATE] 학급 추가
@router.post("/")
def create_class(body: ClassCreate, store: DocumentStore = Depends(get_store)):
    if store.get("classes", body.id) is not None:
        raise ValidationError(f"Class already exists: {body.id}")
    school_class = store.create("classes", body.model_dump())
    return {"success": True, "data": SchoolClass.model_validate(school_class), "message": "Class created"}


# ✅ [READ] 전체 학급 조회
@router.get("/")
def read_classes(store: DocumentStore = Depends(get_store)):
    classes = store.query("classes", order_by="id")
    return {
        "success": True,
        "data": [SchoolClass.model_validate(c) for c in classes],
        "message": f"{len(classes)} classes",
    }


# ✅ [READ] 담임 미배정 학급
@router.get("/available")
def read_available_classes(store: DocumentStore = Depends(get_store)):
    classes = staffing.get_available_classes(store)
    return {
        "success": True,
        "data": [SchoolClass.model_validate(c) for c in classes],
        "message": f"{len(classes)} classes without a class teacher",
    }


# ✅ [READ] 단일 학급 조회
@router.get("/{class_id}")
def read_class(class_id: str, store: DocumentStore = Depends(get_store)):
    school_class = store.get("classes", class_id)
    if school_class is None:
        raise NotFoundError(f"Class not found: {class_id}")
    return {"success": True, "data": SchoolClass.model_validate(school_class), "message": "Class loaded"}


# ==========================================================
# [담임] 배정 / 해제
# ==========================================================

@router.get("/{class_id}/class-teacher")
def read_class_teacher(class_id: str, store: DocumentStore = Depends(get_store)):
    teacher = staffing.get_class_teacher_for_class(store, class_id)
    if teacher is None:
        raise NotFoundError(f"No class teacher assigned to {class_id}")
    return {"success": True, "data": Teacher.model_validate(teacher), "message": "Class teacher loaded"}


@router.put("/{class_id}/class-teacher")
def assign_class_teacher(class_id: str, body: ClassTeacherAssign, store: DocumentStore = Depends(get_store)):
    school_class = staffing.assign_class_teacher(store, class_id, body.teacher_id)
    return {
        "success": True,
        "data": SchoolClass.model_validate(school_class),
        "message": f"{school_class.class_teacher_name} assigned as class teacher",
    }


@router.delete("/{class_id}/class-teacher")
def remove_class_teacher(class_id: str, store: DocumentStore = Depends(get_store)):
    school_class = staffing.remove_class_teacher(store, class_id)
    return {"success": True, "data": SchoolClass.model_validate(school_class), "message": "Class teacher removed"}


# ==========================================================
# [교과] 배정 / 해제
# ==========================================================

@router.get("/{class_id}/subject-teachers")
def read_subject_teachers(class_id: str, store: DocumentStore = Depends(get_store)):
    assignments = staffing.list_subject_teachers(store, class_id)
    return {
        "success": True,
        "data": [SubjectTeacherAssignment.model_validate(a) for a in assignments],
        "message": f"{len(assignments)} subject teachers",
    }


@router.put("/{class_id}/subject-teachers")
def assign_subject_teacher(class_id: str, body: SubjectTeacherAssign, store: DocumentStore = Depends(get_store)):
    assignment = staffing.assign_subject_teacher(store, class_id, body.subject_id, body.teacher_id)
    return {
        "success": True,
        "data": SubjectTeacherAssignment.model_validate(assignment),
        "message": f"{assignment.teacher_name} assigned to {assignment.subject_name}",
    }


@router.delete("/{class_id}/subject-teachers/{subject_id}")
def remove_subject_teacher(class_id: str, subject_id: str, store: DocumentStore = Depends(get_store)):
    staffing.remove_subject_teacher(store, class_id, subject_id)
    return {"success": True, "data": None, "message": f"Subject teacher removed from {subject_id}"}
