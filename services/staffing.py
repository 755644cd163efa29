"""
services/staffing.py

- 교사 등록 → 승인 요청 → 관리자 승인/반려
- 담임 / 교과 담당 교사 배정·해제
- 상태 전이는 모두 store.batch() 안에서 처리 (교사·학급·요청 문서를 함께 갱신)
"""

import logging
from typing import List, Optional

from models.classes import SchoolClass
from models.teachers import Teacher, TeacherApproval
from schemas.teachers import ApprovalCreate, TeacherCreate
from services.academic_calendar import utcnow
from services.document_store import DocumentStore
from services.errors import NotFoundError, ValidationError
from services.records import get_subject_name

logger = logging.getLogger(__name__)


def _require_teacher(store: DocumentStore, teacher_id: str) -> Teacher:
    teacher = store.get("teachers", teacher_id)
    if teacher is None:
        raise NotFoundError(f"Teacher not found: {teacher_id}")
    return teacher


def _require_active_teacher(store: DocumentStore, teacher_id: str) -> Teacher:
    teacher = _require_teacher(store, teacher_id)
    if not teacher.is_active:
        raise ValidationError(f"Teacher {teacher_id} is not active (pending approval or deactivated)")
    return teacher


def _require_class(store: DocumentStore, class_id: str) -> SchoolClass:
    school_class = store.get("classes", class_id)
    if school_class is None:
        raise NotFoundError(f"Class not found: {class_id}")
    return school_class


def _require_pending_approval(store: DocumentStore, approval_id: str) -> TeacherApproval:
    approval = store.get("teacherApprovals", approval_id)
    if approval is None:
        raise NotFoundError(f"Approval request not found: {approval_id}")
    if approval.status != "pending":
        raise ValidationError(f"Approval request {approval_id} is already {approval.status}")
    return approval


def subject_assignment_id(class_id: str, subject_id: str) -> str:
    return f"{class_id}_{subject_id}"


# ==========================================================
# [교사] 등록 / 조회
# ==========================================================
def create_teacher(store: DocumentStore, data: TeacherCreate) -> Teacher:
    if store.get("teachers", data.id) is not None:
        raise ValidationError(f"Teacher id already exists: {data.id}")
    if store.query("teachers", where={"email": data.email}, limit=1):
        raise ValidationError(f"Email already registered: {data.email}")

    teacher = store.create("teachers", {
        **data.model_dump(exclude={"staff_id", "subjects"}),
        "staff_id": data.staff_id or f"STAFF_{data.id}",
        "subjects": list(dict.fromkeys(data.subjects)),
        "is_class_teacher": False,
        "is_subject_teacher": False,
        "is_active": False,
        "is_pending": True,
    })
    logger.info(f"Teacher created (pending approval): {teacher.id}")
    return teacher


def get_pending_teachers(store: DocumentStore) -> List[Teacher]:
    return store.query("teachers", where={"is_pending": True, "is_active": False}, order_by="created_at")


def get_class_teacher_for_class(store: DocumentStore, class_id: str) -> Optional[Teacher]:
    teachers = store.query(
        "teachers",
        where={"is_class_teacher": True, "assigned_class_id": class_id, "is_active": True},
        limit=1,
    )
    return teachers[0] if teachers else None


def get_subject_teachers(store: DocumentStore, subject_id: str) -> List[Teacher]:
    """해당 과목을 담당하는 활성 교사 목록"""
    active = store.query("teachers", where={"is_active": True}, order_by="id")
    return [t for t in active if subject_id in (t.subjects or [])]


# ==========================================================
# [승인] 요청 / 승인 / 반려
# ==========================================================
def create_pending_approval(store: DocumentStore, data: ApprovalCreate) -> TeacherApproval:
    teacher = _require_teacher(store, data.teacher_id)
    if store.query("teacherApprovals", where={"teacher_id": teacher.id, "status": "pending"}, limit=1):
        raise ValidationError(f"Teacher {teacher.id} already has a pending approval request")

    approval = store.create("teacherApprovals", {
        "teacher_id": teacher.id,
        "first_name": teacher.first_name,
        "last_name": teacher.last_name,
        "email": teacher.email,
        "teacher_type": teacher.teacher_type,
        "requested_class_id": data.requested_class_id,
        "requested_subjects": list(dict.fromkeys(data.requested_subjects)),
        "status": "pending",
        "submitted_at": utcnow(),
    })
    logger.info(f"Pending approval created: {approval.id} for {teacher.id}")
    return approval


def get_pending_approvals(store: DocumentStore) -> List[TeacherApproval]:
    return store.query("teacherApprovals", where={"status": "pending"}, order_by="submitted_at")


def approve_teacher(store: DocumentStore, approval_id: str, admin_id: str) -> TeacherApproval:
    approval = _require_pending_approval(store, approval_id)
    _require_teacher(store, approval.teacher_id)

    with store.batch():
        store.update("teachers", approval.teacher_id, {"is_active": True, "is_pending": False})
        approval = store.update("teacherApprovals", approval.id, {
            "status": "approved",
            "reviewed_by": admin_id,
            "reviewed_at": utcnow(),
        })

    logger.info(f"Teacher approved: {approval.teacher_id} by {admin_id}")
    return approval


def reject_teacher(store: DocumentStore, approval_id: str, admin_id: str, reason: str) -> TeacherApproval:
    """반려된 교사 문서는 삭제, 요청 문서에는 사유를 남김"""
    approval = _require_pending_approval(store, approval_id)

    with store.batch():
        if store.get("teachers", approval.teacher_id) is not None:
            store.delete("teachers", approval.teacher_id)
        approval = store.update("teacherApprovals", approval.id, {
            "status": "rejected",
            "reviewed_by": admin_id,
            "reviewed_at": utcnow(),
            "review_notes": reason,
        })

    logger.info(f"Teacher rejected: {approval.teacher_id} by {admin_id} ({reason})")
    return approval


# ==========================================================
# [담임] 배정 / 해제
# ==========================================================
def class_has_class_teacher(store: DocumentStore, class_id: str) -> bool:
    return _require_class(store, class_id).class_teacher_id is not None


def get_available_classes(store: DocumentStore) -> List[SchoolClass]:
    """담임이 배정되지 않은 학급"""
    return store.query("classes", where={"class_teacher_id": None}, order_by="id")


def assign_class_teacher(store: DocumentStore, class_id: str, teacher_id: str) -> SchoolClass:
    school_class = _require_class(store, class_id)
    teacher = _require_active_teacher(store, teacher_id)

    if school_class.class_teacher_id is not None:
        raise ValidationError(f"Class {class_id} already has a class teacher assigned")
    if teacher.is_class_teacher and teacher.assigned_class_id:
        raise ValidationError(f"Teacher {teacher_id} is already class teacher of {teacher.assigned_class_id}")

    with store.batch():
        school_class = store.update("classes", class_id, {
            "class_teacher_id": teacher.id,
            "class_teacher_name": teacher.full_name,
            "class_teacher_assigned_at": utcnow(),
        })
        store.update("teachers", teacher.id, {"is_class_teacher": True, "assigned_class_id": class_id})

    logger.info(f"Class teacher assigned: {class_id} ← {teacher.id}")
    return school_class


def remove_class_teacher(store: DocumentStore, class_id: str) -> SchoolClass:
    school_class = _require_class(store, class_id)
    previous_id = school_class.class_teacher_id

    with store.batch():
        school_class = store.update("classes", class_id, {
            "class_teacher_id": None,
            "class_teacher_name": None,
            "class_teacher_assigned_at": None,
        })
        previous = store.get("teachers", previous_id) if previous_id else None
        if previous is not None and previous.assigned_class_id == class_id:
            store.update("teachers", previous.id, {"is_class_teacher": False, "assigned_class_id": None})

    logger.info(f"Class teacher removed: {class_id} (was {previous_id})")
    return school_class


# ==========================================================
# [교과] 배정 / 해제 (학급·과목당 1명)
# ==========================================================
def assign_subject_teacher(store: DocumentStore, class_id: str, subject_id: str, teacher_id: str):
    school_class = _require_class(store, class_id)
    if store.get("subjects", subject_id) is None:
        raise NotFoundError(f"Subject not found: {subject_id}")
    teacher = _require_active_teacher(store, teacher_id)

    assignment_id = subject_assignment_id(class_id, subject_id)
    existing = store.get("subjectTeachers", assignment_id)
    if existing is not None:
        raise ValidationError(
            f"Subject {existing.subject_name} is already taught by {existing.teacher_name} in {school_class.name}"
        )

    with store.batch():
        assignment = store.set("subjectTeachers", assignment_id, {
            "class_id": class_id,
            "subject_id": subject_id,
            "subject_name": get_subject_name(store, subject_id),
            "teacher_id": teacher.id,
            "teacher_name": teacher.full_name,
            "assigned_at": utcnow(),
        })
        subjects = list(teacher.subjects or [])
        if subject_id not in subjects:
            subjects.append(subject_id)
        store.update("teachers", teacher.id, {"is_subject_teacher": True, "subjects": subjects})

    logger.info(f"Subject teacher assigned: {class_id}/{subject_id} ← {teacher.id}")
    return assignment


def remove_subject_teacher(store: DocumentStore, class_id: str, subject_id: str) -> None:
    _require_class(store, class_id)
    assignment_id = subject_assignment_id(class_id, subject_id)
    assignment = store.get("subjectTeachers", assignment_id)
    if assignment is None:
        raise NotFoundError(f"No teacher assigned to {subject_id} in {class_id}")

    teacher_id = assignment.teacher_id
    with store.batch():
        store.delete("subjectTeachers", assignment_id)
        # 다른 학급에서도 교과를 맡고 있지 않으면 교과 담당 표시 해제
        remaining = store.query("subjectTeachers", where={"teacher_id": teacher_id}, limit=1)
        if not remaining and store.get("teachers", teacher_id) is not None:
            store.update("teachers", teacher_id, {"is_subject_teacher": False})

    logger.info(f"Subject teacher removed: {class_id}/{subject_id} (was {teacher_id})")


def list_subject_teachers(store: DocumentStore, class_id: str):
    _require_class(store, class_id)
    return store.query("subjectTeachers", where={"class_id": class_id}, order_by="subject_id")


def get_classes_by_teacher(store: DocumentStore, teacher_id: str) -> List[SchoolClass]:
    """담임 또는 교과 담당으로 배정된 학급 (ID 순)"""
    class_ids = {c.id for c in store.query("classes", where={"class_teacher_id": teacher_id})}
    class_ids.update(a.class_id for a in store.query("subjectTeachers", where={"teacher_id": teacher_id}))
    if not class_ids:
        return []
    return store.query("classes", in_=("id", class_ids), order_by="id")
