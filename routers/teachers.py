from fastapi import APIRouter, Depends

from dependencies.store import get_store
from schemas.classes import SchoolClass
from schemas.teachers import (
    ApprovalCreate,
    ApprovalRejection,
    ApprovalReview,
    Teacher,
    TeacherApproval,
    TeacherCreate,
)
from services import staffing
from services.document_store import DocumentStore
from services.errors import NotFoundError

router = APIRouter(prefix="/teachers", tags=["Teachers"])


# ==========================================================
# [1단계] 교사 등록 / 조회
# ==========================================================

# ✅ [CREATE] 교사 등록 (승인 전까지 비활성)
@router.post("/")
def create_teacher(body: TeacherCreate, store: DocumentStore = Depends(get_store)):
    teacher = staffing.create_teacher(store, body)
    return {"success": True, "data": Teacher.model_validate(teacher), "message": "Teacher registered, pending approval"}


# ✅ [READ] 승인 대기 교사 목록
@router.get("/pending")
def read_pending_teachers(store: DocumentStore = Depends(get_store)):
    teachers = staffing.get_pending_teachers(store)
    return {
        "success": True,
        "data": [Teacher.model_validate(t) for t in teachers],
        "message": f"{len(teachers)} pending teachers",
    }


# ✅ [READ] 과목별 담당 교사
@router.get("/subject/{subject_id}")
def read_subject_teachers(subject_id: str, store: DocumentStore = Depends(get_store)):
    teachers = staffing.get_subject_teachers(store, subject_id)
    return {
        "success": True,
        "data": [Teacher.model_validate(t) for t in teachers],
        "message": f"{len(teachers)} teachers for {subject_id}",
    }


# ==========================================================
# [2단계] 승인 요청 / 승인 / 반려
# ==========================================================

@router.post("/approvals")
def create_approval(body: ApprovalCreate, store: DocumentStore = Depends(get_store)):
    approval = staffing.create_pending_approval(store, body)
    return {"success": True, "data": TeacherApproval.model_validate(approval), "message": "Approval request submitted"}


@router.get("/approvals")
def read_pending_approvals(store: DocumentStore = Depends(get_store)):
    approvals = staffing.get_pending_approvals(store)
    return {
        "success": True,
        "data": [TeacherApproval.model_validate(a) for a in approvals],
        "message": f"{len(approvals)} pending approvals",
    }


# ✅ [UPDATE] 승인 → 교사 활성화
@router.put("/approvals/{approval_id}/approve")
def approve(approval_id: str, body: ApprovalReview, store: DocumentStore = Depends(get_store)):
    approval = staffing.approve_teacher(store, approval_id, body.admin_id)
    return {"success": True, "data": TeacherApproval.model_validate(approval), "message": "Teacher approved"}


# ✅ [UPDATE] 반려 → 교사 문서 삭제, 사유 기록
@router.put("/approvals/{approval_id}/reject")
def reject(approval_id: str, body: ApprovalRejection, store: DocumentStore = Depends(get_store)):
    approval = staffing.reject_teacher(store, approval_id, body.admin_id, body.reason)
    return {"success": True, "data": TeacherApproval.model_validate(approval), "message": "Teacher rejected"}


# ==========================================================
# [3단계] 교사별 조회
# ==========================================================

# ✅ [READ] 담임/교과로 맡은 학급
@router.get("/{teacher_id}/classes")
def read_teacher_classes(teacher_id: str, store: DocumentStore = Depends(get_store)):
    classes = staffing.get_classes_by_teacher(store, teacher_id)
    return {
        "success": True,
        "data": [SchoolClass.model_validate(c) for c in classes],
        "message": f"{len(classes)} classes",
    }


@router.get("/{teacher_id}")
def read_teacher(teacher_id: str, store: DocumentStore = Depends(get_store)):
    teacher = store.get("teachers", teacher_id)
    if teacher is None:
        raise NotFoundError(f"Teacher not found: {teacher_id}")
    return {"success": True, "data": Teacher.model_validate(teacher), "message": "Teacher loaded"}
